import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from task_tracker.errors import Conflict, Forbidden, TokenError, Unauthorized, ValidationError
from task_tracker.models.user import User
from task_tracker.schemas.user import AuthData, UserPublic
from task_tracker.services.tokens import TokenService
from task_tracker.utils.security import get_password_hash, tokens_match, verify_password

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalars().first()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()


async def _start_session(db: AsyncSession, tokens: TokenService, user: User) -> AuthData:
    """
    Issue a token pair and store the refresh token on the user.

    Tokens are only handed back once the commit went through; if it fails
    the exception propagates and the caller gets nothing.
    """
    access_token, refresh_token = tokens.issue_token_pair(user.id)
    user.refresh_token = refresh_token
    await db.commit()
    await db.refresh(user)
    return AuthData(
        user=UserPublic.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


async def register(
    db: AsyncSession,
    tokens: TokenService,
    name: str | None,
    email: str | None,
    password: str | None,
) -> AuthData:
    if not name or not email or not password:
        raise ValidationError("Please provide all required fields")

    if await get_user_by_email(db, email):
        raise Conflict("User already exists")

    hashed_password = await run_in_threadpool(get_password_hash, password)
    user = User(name=name, email=email, hashed_password=hashed_password)
    db.add(user)
    try:
        await db.flush()
        session = await _start_session(db, tokens, user)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise Conflict("User already exists")
    except Exception:
        await db.rollback()
        raise

    logger.info("Registered user %s", user.id)
    return session


async def login(
    db: AsyncSession,
    tokens: TokenService,
    email: str | None,
    password: str | None,
) -> AuthData:
    if not email or not password:
        raise ValidationError("Please provide email and password")

    user = await get_user_by_email(db, email)
    hashed_password = user.hashed_password if user else None
    if not await run_in_threadpool(verify_password, password, hashed_password):
        logger.info("Failed login attempt")
        raise Unauthorized("Invalid email or password")

    try:
        session = await _start_session(db, tokens, user)
    except Exception:
        await db.rollback()
        raise

    logger.info("User %s logged in", user.id)
    return session


async def refresh_access_token(db: AsyncSession, tokens: TokenService, refresh_token: str | None) -> str:
    if not refresh_token:
        raise ValidationError("Refresh token is required")

    try:
        user_id = tokens.verify_refresh_token(refresh_token)
    except TokenError as exc:
        logger.info("Rejected refresh token: %s", exc)
        raise Forbidden("Invalid or expired refresh token")

    user = await get_user_by_id(db, user_id)
    if user is None or not tokens_match(refresh_token, user.refresh_token):
        logger.info("Rejected refresh token for user %s: not the active token", user_id)
        raise Forbidden("Invalid refresh token")

    return tokens.issue_access_token(user.id)


async def logout(db: AsyncSession, user_id: int) -> None:
    user = await get_user_by_id(db, user_id)
    if user is not None and user.refresh_token is not None:
        user.refresh_token = None
        await db.commit()
    logger.info("User %s logged out", user_id)
