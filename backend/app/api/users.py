"""User profile API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import EmailAlreadyRegisteredError, UserNotFoundError
from backend.app.db.base import get_db
from backend.app.models.user import User
from backend.app.schemas.user import UserRecord, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


async def _get_user_or_404(user_id: UUID, db: AsyncSession) -> User:
    user = await db.get(User, str(user_id))
    if not user:
        raise UserNotFoundError(str(user_id))
    return user


@router.get("/{user_id}", response_model=UserRecord)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> UserRecord:
    """Get a user profile."""
    user = await _get_user_or_404(user_id, db)
    return UserRecord.model_validate(user)


@router.patch("/{user_id}", response_model=UserRecord)
async def update_user(
    user_id: UUID,
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserRecord:
    """Update name and/or email."""
    user = await _get_user_or_404(user_id, db)

    if user_update.email is not None:
        email = user_update.email.lower()
        if email != user.email:
            clash = await db.execute(select(User).where(User.email == email))
            if clash.scalar_one_or_none():
                raise EmailAlreadyRegisteredError(email)
            user.email = email
    if user_update.name is not None:
        user.name = user_update.name

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise EmailAlreadyRegisteredError(user_update.email.lower()) from e
    await db.refresh(user)
    return UserRecord.model_validate(user)
