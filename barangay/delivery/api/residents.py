# barangay/delivery/api/residents.py
import logging
import traceback

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barangay.config.database import get_db
from barangay.delivery.api.dependencies import PageParams, current_session, page_params
from barangay.delivery.schemas.body import Message, Page, ResidentCreate, ResidentOut, ResidentUpdate
from barangay.infrastructure.database import repository
from barangay.infrastructure.database.models import Resident

router = APIRouter(prefix="/residents", tags=["residents"], dependencies=[Depends(current_session)])
logger = logging.getLogger("uvicorn.error")

DUPLICATE_PHONE = "Phone number already exists."


async def _get_or_404(db: AsyncSession, resident_id: int) -> Resident:
    resident = await repository.get_or_none(db, Resident, resident_id)
    if resident is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resident not found")
    return resident


@router.get("", response_model=Page[ResidentOut])
async def list_residents(params: PageParams = Depends(page_params), db: AsyncSession = Depends(get_db)):
    rows, total = await repository.paginate(
        db, Resident, params.page, params.limit, params.search,
        [Resident.last_name, Resident.first_name, Resident.phone_number, Resident.purok],
    )
    logger.info(f"Residents search '{params.search}' | found {len(rows)} of {total}")
    return Page[ResidentOut](
        data=[ResidentOut.model_validate(r) for r in rows],
        total=total,
        pages=params.pages(total),
        current_page=params.page,
    )


@router.get("/{resident_id}", response_model=ResidentOut)
async def get_resident(resident_id: int, db: AsyncSession = Depends(get_db)):
    return await _get_or_404(db, resident_id)


@router.post("", response_model=ResidentOut, status_code=status.HTTP_201_CREATED)
async def create_resident(body: ResidentCreate, db: AsyncSession = Depends(get_db)):
    try:
        resident = await repository.save(db, Resident(**body.model_dump()))
        logger.info(f"Resident {resident.id} created")
        return resident
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_PHONE)
    except Exception as e:
        await db.rollback()
        logger.error(f"=== RESIDENT CREATE ERROR: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save the resident.")


@router.put("/{resident_id}", response_model=ResidentOut)
async def update_resident(resident_id: int, body: ResidentUpdate, db: AsyncSession = Depends(get_db)):
    try:
        resident = await _get_or_404(db, resident_id)
        # fields left out of the body keep their stored value
        for name, value in body.model_dump(exclude_unset=True).items():
            if value is None and name in ("first_name", "last_name", "is_indigent", "is_senior_citizen"):
                continue
            setattr(resident, name, value)
        return await repository.save(db, resident)
    except HTTPException:
        raise
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_PHONE)
    except Exception as e:
        await db.rollback()
        logger.error(f"=== RESIDENT UPDATE ERROR {resident_id}: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save the resident.")


@router.delete("/{resident_id}", response_model=Message)
async def delete_resident(resident_id: int, db: AsyncSession = Depends(get_db)):
    try:
        resident = await _get_or_404(db, resident_id)
        await repository.delete(db, resident)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"=== RESIDENT DELETE ERROR {resident_id}: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete the resident.")
    logger.info(f"Resident {resident_id} deleted")
    return Message(message="Resident deleted successfully")
