"""Sign-up and sign-in endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError
from backend.app.core.security import hash_password, needs_rehash, verify_password
from backend.app.db.base import get_db
from backend.app.models.user import User
from backend.app.schemas.user import AuthResponse, SignInRequest, UserCreate, UserRecord

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Register a new account."""
    email = user_data.email.lower()
    existing = await db.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none():
        raise EmailAlreadyRegisteredError(email)

    user = User(
        email=email,
        name=user_data.name,
        password_hash=hash_password(user_data.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent sign-up for the same email
        await db.rollback()
        raise EmailAlreadyRegisteredError(email) from e
    await db.refresh(user)

    logger.info(f"[AUTH] Registered user {user.id}")
    return AuthResponse(success=True, user=UserRecord.model_validate(user))


@router.post("/signin", response_model=AuthResponse)
async def sign_in(
    credentials: SignInRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Check email/password and return the account."""
    result = await db.execute(select(User).where(User.email == credentials.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.info("[AUTH] Rejected sign-in attempt")
        raise InvalidCredentialsError()

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(credentials.password)
        await db.commit()
        await db.refresh(user)
        logger.info(f"[AUTH] Upgraded password hash for user {user.id}")

    return AuthResponse(success=True, user=UserRecord.model_validate(user))
