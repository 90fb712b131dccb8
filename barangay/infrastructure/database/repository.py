# barangay/infrastructure/database/repository.py
from typing import List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from barangay.infrastructure.database.models import Base

ModelT = TypeVar("ModelT", bound=Base)


async def paginate(
    session: AsyncSession,
    model: Type[ModelT],
    page: int,
    limit: int,
    search: str = "",
    search_columns: Sequence = (),
) -> Tuple[List[ModelT], int]:
    """Return one page of rows (newest first) and the total matching count.

    ``search`` is matched as a case-insensitive substring against every column
    in ``search_columns``; a row matches when any column does.
    """
    query = select(model)
    count_query = select(func.count()).select_from(model)

    if search and search_columns:
        pattern = f"%{search.lower()}%"
        condition = or_(*[func.lower(col).like(pattern) for col in search_columns])
        query = query.where(condition)
        count_query = count_query.where(condition)

    offset = (page - 1) * limit
    query = query.order_by(model.id.desc()).offset(offset).limit(limit)

    rows = (await session.execute(query)).scalars().all()
    total = (await session.execute(count_query)).scalar_one()
    return list(rows), total


async def get_or_none(session: AsyncSession, model: Type[ModelT], obj_id: int) -> Optional[ModelT]:
    return await session.get(model, obj_id)


async def save(session: AsyncSession, obj: ModelT) -> ModelT:
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def delete(session: AsyncSession, obj: Base) -> None:
    await session.delete(obj)
    await session.commit()
