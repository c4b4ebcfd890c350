from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.dependencies import get_db, get_current_user
from task_tracker.schemas.common import ApiResponse
from task_tracker.schemas.task import (
    PRIORITY_PATTERN,
    STATUS_PATTERN,
    Task as TaskSchema,
    TaskCreate,
    TaskData,
    TaskPage,
    TaskUpdate,
)
from task_tracker.schemas.user import CurrentUser
from task_tracker.services import tasks as task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _task_data(task) -> TaskData:
    return TaskData(task=TaskSchema.model_validate(task))


@router.post("", response_model=ApiResponse[TaskData], status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    task = await task_service.create_task(db, task_data, current_user.id)
    return ApiResponse(message="Task created successfully", data=_task_data(task))


@router.get("", response_model=ApiResponse[TaskPage])
async def list_tasks(
    status: str | None = Query(None, pattern=STATUS_PATTERN),
    priority: str | None = Query(None, pattern=PRIORITY_PATTERN),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await task_service.list_tasks(db, current_user.id, status, priority, page, limit)
    return ApiResponse(data=data)


@router.get("/{task_id}", response_model=ApiResponse[TaskData])
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    task = await task_service.get_task_by_id(db, task_id, current_user.id)
    return ApiResponse(data=_task_data(task))


@router.put("/{task_id}", response_model=ApiResponse[TaskData])
async def update_task(
    task_id: int,
    update_data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    task = await task_service.update_task(db, task_id, current_user.id, update_data)
    return ApiResponse(message="Task updated successfully", data=_task_data(task))


@router.delete("/{task_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    await task_service.delete_task(db, task_id, current_user.id)
    return ApiResponse(message="Task deleted successfully")
