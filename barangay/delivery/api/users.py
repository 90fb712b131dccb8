# barangay/delivery/api/users.py
import logging
import traceback

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barangay.config.database import get_db
from barangay.delivery.api.dependencies import PageParams, current_session, get_session_store, page_params
from barangay.delivery.schemas.body import LoginBody, LoginResponse, Message, Page, UserCreate, UserOut, UserUpdate
from barangay.domain.session import SessionContext, SessionStore
from barangay.infrastructure.database import repository
from barangay.infrastructure.database.models import User
from barangay.infrastructure.security.passwords import hash_password, verify_password

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger("uvicorn.error")

DUPLICATE_USERNAME = "Username might already exist"
REQUIRED_USER_FIELDS = ("username", "role")


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginBody,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    user = (await db.execute(select(User).where(User.username == body.username))).scalar_one_or_none()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.warning(f"Failed login for '{body.username}'")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    ctx = store.open(user.id, user.username, user.role)
    logger.info(f"User {user.id} '{user.username}' logged in")
    return LoginResponse(token=ctx.token, expires_at=ctx.expires_at, user=UserOut.model_validate(user))


@router.post("/logout", response_model=Message)
async def logout(
    ctx: SessionContext = Depends(current_session),
    store: SessionStore = Depends(get_session_store),
):
    store.close(ctx.token_id)
    logger.info(f"User {ctx.user_id} '{ctx.username}' logged out")
    return Message(message="Logged out")


@router.get("/me", response_model=UserOut)
async def me(ctx: SessionContext = Depends(current_session), db: AsyncSession = Depends(get_db)):
    user = await repository.get_or_none(db, User, ctx.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=Page[UserOut], dependencies=[Depends(current_session)])
async def list_users(params: PageParams = Depends(page_params), db: AsyncSession = Depends(get_db)):
    rows, total = await repository.paginate(
        db, User, params.page, params.limit, params.search, [User.username, User.role]
    )
    logger.info(f"Users search '{params.search}' | found {len(rows)} of {total}")
    return Page[UserOut](
        data=[UserOut.model_validate(u) for u in rows],
        total=total,
        pages=params.pages(total),
        current_page=params.page,
    )


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    user = User(
        username=body.username,
        password_hash=hash_password(body.password),
        role=body.role,
        designation=body.designation,
        email=body.email,
        pic=body.pic,
    )
    try:
        user = await repository.save(db, user)
        logger.info(f"User {user.id} '{user.username}' created")
        return user
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_USERNAME)
    except Exception as e:
        await db.rollback()
        logger.error(f"=== USER CREATE ERROR: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create the user.")


@router.put("/{user_id}", response_model=UserOut, dependencies=[Depends(current_session)])
async def update_user(user_id: int, body: UserUpdate, db: AsyncSession = Depends(get_db)):
    try:
        user = await repository.get_or_none(db, User, user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        changes = body.model_dump(exclude_unset=True)
        password = changes.pop("password", None)
        if password:
            user.password_hash = hash_password(password)
        for name, value in changes.items():
            # null on a required column means "leave as is"
            if value is None and name in REQUIRED_USER_FIELDS:
                continue
            setattr(user, name, value)

        return await repository.save(db, user)
    except HTTPException:
        raise
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_USERNAME)
    except Exception as e:
        await db.rollback()
        logger.error(f"=== USER UPDATE ERROR {user_id}: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update the user.")


@router.delete("/{user_id}", response_model=Message)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    ctx: SessionContext = Depends(current_session),
):
    try:
        user = await repository.get_or_none(db, User, user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        await repository.delete(db, user)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"=== USER DELETE ERROR {user_id}: {e} ===\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete the user.")

    closed = store.close_for_user(user_id)
    logger.info(f"User {user_id} deleted by {ctx.username}, {closed} session(s) closed")
    return Message(message="User deleted successfully")
