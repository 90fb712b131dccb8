# barangay/delivery/api/documents.py
import logging
import traceback

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from barangay.config.database import get_db
from barangay.delivery.api.dependencies import PageParams, current_session, get_template_service, page_params
from barangay.delivery.schemas.body import Message, Page, TemplateCreate, TemplateOut, TemplateReplace
from barangay.domain.errors import NotFoundError
from barangay.domain.layout import LayoutEditor
from barangay.domain.template_service import TemplateService
from barangay.infrastructure.database import repository
from barangay.infrastructure.database.models import DocumentTemplate

router = APIRouter(prefix="/documents", tags=["documents"], dependencies=[Depends(current_session)])
logger = logging.getLogger("uvicorn.error")


@router.get("", response_model=Page[TemplateOut])
async def list_documents(params: PageParams = Depends(page_params), db: AsyncSession = Depends(get_db)):
    rows, total = await repository.paginate(
        db, DocumentTemplate, params.page, params.limit, params.search, [DocumentTemplate.name]
    )
    return Page[TemplateOut](
        data=[TemplateOut.model_validate(t) for t in rows],
        total=total,
        pages=params.pages(total),
        current_page=params.page,
    )


@router.get("/{template_id}", response_model=TemplateOut)
async def get_document(
    template_id: int,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    try:
        return await service.get_template(db, template_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")


@router.post("", response_model=TemplateOut, status_code=status.HTTP_201_CREATED)
async def create_document(
    body: TemplateCreate,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    try:
        layout = LayoutEditor(body.layout_settings) if body.layout_settings is not None else None
        return await service.create_template(db, body.name, layout)
    except Exception as e:
        await db.rollback()
        logger.error(f"=== TEMPLATE CREATE ERROR '{body.name}': {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save the template.")


@router.put("/{template_id}", response_model=TemplateOut)
async def replace_document(
    template_id: int,
    body: TemplateReplace,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    try:
        return await service.replace_template(db, template_id, body.name, LayoutEditor(body.layout_settings))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    except Exception as e:
        await db.rollback()
        logger.error(f"=== TEMPLATE SAVE ERROR {template_id}: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save the template.")


@router.delete("/{template_id}", response_model=Message)
async def delete_document(
    template_id: int,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    try:
        await service.delete_template(db, template_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    except Exception as e:
        await db.rollback()
        logger.error(f"=== TEMPLATE DELETE ERROR {template_id}: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete the template.")
    return Message(message="Template deleted successfully")


@router.get("/{template_id}/preview/{resident_id}")
async def preview_document(
    template_id: int,
    resident_id: int,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    try:
        layout = await service.preview(db, template_id, resident_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{e.entity} not found")
    return {"templateId": template_id, "residentId": resident_id, "layoutSettings": layout}


@router.get("/{template_id}/print/{resident_id}", response_class=Response)
async def print_document(
    template_id: int,
    resident_id: int,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    try:
        png = await service.render_print(db, template_id, resident_id)
        return Response(content=png, media_type="image/png")
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{e.entity} not found")
    except Exception as e:
        logger.error(f"=== PRINT ERROR template {template_id} resident {resident_id}: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to render the document.",
        )
