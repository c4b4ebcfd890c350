import logging
import math

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from task_tracker.config import settings
from task_tracker.errors import Forbidden, NotFound, ValidationError
from task_tracker.models.tasks import Task
from task_tracker.schemas.task import (
    IN_PROGRESS,
    LEGACY_IN_PROGRESS,
    Pagination,
    Task as TaskSchema,
    TaskCreate,
    TaskPage,
    TaskUpdate,
    canonical_status,
)
from task_tracker.utils.sanitization import is_blank

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "todo"
DEFAULT_PRIORITY = "medium"


async def create_task(db: AsyncSession, task_data: TaskCreate, owner_id: int) -> Task:
    if is_blank(task_data.title):
        raise ValidationError("Task title is required")

    new_task = Task(
        title=task_data.title,
        description=task_data.description or "",
        status=task_data.status or DEFAULT_STATUS,
        priority=task_data.priority or DEFAULT_PRIORITY,
        due_date=task_data.due_date,
        user_id=owner_id,
    )
    db.add(new_task)
    await db.commit()
    await db.refresh(new_task)

    logger.info("User %s created task %s", owner_id, new_task.id)
    return new_task


def _status_filter(status: str):
    status = canonical_status(status)
    if status == IN_PROGRESS:
        return Task.status.in_([IN_PROGRESS, LEGACY_IN_PROGRESS])
    return Task.status == status


async def list_tasks(
    db: AsyncSession,
    owner_id: int,
    status: str | None = None,
    priority: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> TaskPage:
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive integers")

    filters = [Task.user_id == owner_id]
    if status:
        filters.append(_status_filter(status))
    if priority:
        filters.append(Task.priority == priority)
    logger.debug("Listing tasks for user %s status=%s priority=%s page=%s limit=%s",
                 owner_id, status, priority, page, limit)

    result = await db.execute(
        select(Task)
        .filter(*filters)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    tasks = result.scalars().all()

    total = (await db.execute(select(func.count(Task.id)).filter(*filters))).scalar_one()

    return TaskPage(
        tasks=[TaskSchema.model_validate(t) for t in tasks],
        pagination=Pagination(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_tasks=total,
            limit=limit,
        ),
    )


async def get_task_by_id(db: AsyncSession, task_id: int, owner_id: int) -> Task:
    result = await db.execute(select(Task).filter(Task.id == task_id))
    task = result.scalars().first()
    if not task:
        raise NotFound("Task not found")
    if task.user_id != owner_id:
        if settings.HIDE_FOREIGN_TASKS:
            raise NotFound("Task not found")
        raise Forbidden("Not authorized to access this task")
    return task


async def update_task(db: AsyncSession, task_id: int, owner_id: int, update_data: TaskUpdate) -> Task:
    task = await get_task_by_id(db, task_id, owner_id)

    # Only fields the client actually sent; explicit nulls included
    changes = update_data.model_dump(exclude_unset=True)

    if "title" in changes and is_blank(changes["title"]):
        raise ValidationError("Task title cannot be empty")
    for field in ("status", "priority"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"Task {field} cannot be null")
    if "description" in changes and changes["description"] is None:
        changes["description"] = ""

    for key, value in changes.items():
        setattr(task, key, value)

    await db.commit()
    await db.refresh(task)
    return task


async def delete_task(db: AsyncSession, task_id: int, owner_id: int) -> None:
    task = await get_task_by_id(db, task_id, owner_id)
    await db.delete(task)
    await db.commit()
    logger.info("User %s deleted task %s", owner_id, task_id)
