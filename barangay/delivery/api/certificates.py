# barangay/delivery/api/certificates.py
import logging
import traceback

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from barangay.config.database import get_db
from barangay.delivery.api.dependencies import PageParams, current_session, get_template_service, page_params
from barangay.delivery.schemas.body import CertificateCreate, CertificateOut, Message, Page
from barangay.domain.errors import NotFoundError
from barangay.domain.session import SessionContext
from barangay.domain.template_service import TemplateService
from barangay.infrastructure.database import repository
from barangay.infrastructure.database.models import Certificate

router = APIRouter(prefix="/certificates", tags=["certificates"])
logger = logging.getLogger("uvicorn.error")


@router.post("", response_model=CertificateOut, status_code=status.HTTP_201_CREATED)
async def generate_certificate(
    body: CertificateCreate,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
    ctx: SessionContext = Depends(current_session),
):
    logger.info(f"=== CERTIFICATE START template {body.template_id} resident {body.resident_id} by {ctx.username} ===")
    try:
        certificate = await service.generate_certificate(db, body.template_id, body.resident_id)
        logger.info(f"=== CERTIFICATE SUCCESS {certificate.id} ===")
        return certificate
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{e.entity} not found")
    except Exception as e:
        logger.error(f"=== CERTIFICATE ERROR: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate the certificate.",
        )


@router.get("", response_model=Page[CertificateOut], dependencies=[Depends(current_session)])
async def list_certificates(params: PageParams = Depends(page_params), db: AsyncSession = Depends(get_db)):
    rows, total = await repository.paginate(
        db, Certificate, params.page, params.limit, params.search, [Certificate.template_name]
    )
    return Page[CertificateOut](
        data=[CertificateOut.model_validate(c) for c in rows],
        total=total,
        pages=params.pages(total),
        current_page=params.page,
    )


@router.get("/{certificate_id}", response_model=CertificateOut, dependencies=[Depends(current_session)])
async def get_certificate(
    certificate_id: int,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    try:
        return await service.get_certificate(db, certificate_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Certificate not found")


@router.delete("/{certificate_id}", response_model=Message, dependencies=[Depends(current_session)])
async def delete_certificate(
    certificate_id: int,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    try:
        certificate = await service.get_certificate(db, certificate_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Certificate not found")
    await repository.delete(db, certificate)
    return Message(message="Certificate deleted successfully")
