import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from task_tracker.errors import Conflict, Unauthorized, ValidationError
from task_tracker.models.tasks import Task
from task_tracker.models.user import User
from task_tracker.services.auth import get_user_by_email, get_user_by_id
from task_tracker.schemas.user import CurrentUser, ProfileUpdate
from task_tracker.utils.security import get_password_hash
from task_tracker.utils.sanitization import is_blank

logger = logging.getLogger(__name__)


async def load_current_user(db: AsyncSession, user_id: int) -> CurrentUser | None:
    """Public fields only; the password hash and refresh token are never selected."""
    result = await db.execute(
        select(User.id, User.name, User.email, User.created_at, User.updated_at)
        .filter(User.id == user_id)
    )
    row = result.first()
    if row is None:
        return None
    return CurrentUser.model_validate(dict(row._mapping))


async def _require_user(db: AsyncSession, user_id: int) -> User:
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise Unauthorized("User not found")
    return user


async def update_profile(db: AsyncSession, user_id: int, update_data: ProfileUpdate) -> CurrentUser:
    user = await _require_user(db, user_id)
    changes = update_data.model_dump(exclude_unset=True)

    if "name" in changes:
        if is_blank(changes["name"]):
            raise ValidationError("Name cannot be empty")
        user.name = changes["name"]

    if "email" in changes:
        if is_blank(changes["email"]):
            raise ValidationError("Email cannot be empty")
        if changes["email"] != user.email:
            existing = await get_user_by_email(db, changes["email"])
            if existing is not None:
                raise Conflict("Email is already in use")
            user.email = changes["email"]

    if "password" in changes:
        if is_blank(changes["password"]):
            raise ValidationError("Password cannot be empty")
        user.hashed_password = await run_in_threadpool(get_password_hash, changes["password"])
        # Force other sessions to log in again
        user.refresh_token = None

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Email is already in use")
    await db.refresh(user)
    return CurrentUser.model_validate(user)


async def delete_profile(db: AsyncSession, user_id: int) -> None:
    user = await _require_user(db, user_id)
    await db.execute(delete(Task).where(Task.user_id == user_id))
    await db.delete(user)
    await db.commit()
    logger.info("Deleted user %s and their tasks", user_id)
