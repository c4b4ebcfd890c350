import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.database import get_db as db_session
from task_tracker.config import settings
from task_tracker.errors import TokenError, Unauthorized
from task_tracker.schemas.user import CurrentUser
from task_tracker.services.tokens import TokenService
from task_tracker.services.users import load_current_user

logger = logging.getLogger(__name__)

# auto_error=False so a missing header or a non-Bearer scheme reaches us as None
bearer_scheme = HTTPBearer(auto_error=False)


async def get_db(db: AsyncSession = Depends(db_session)):
    return db


def get_token_service() -> TokenService:
    return TokenService.from_settings(settings)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authorized, no token provided")

    try:
        user_id = tokens.verify_access_token(credentials.credentials)
    except TokenError as exc:
        raise Unauthorized("Not authorized, token failed", error=str(exc))

    user = await load_current_user(db, user_id)
    if user is None:
        logger.info("Token for missing user %s rejected", user_id)
        raise Unauthorized("User not found")
    return user
