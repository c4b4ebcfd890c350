from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.dependencies import get_db, get_current_user
from task_tracker.schemas.common import ApiResponse
from task_tracker.schemas.user import CurrentUser, ProfileUpdate, UserPublic
from task_tracker.services import users as user_service

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/profile", response_model=ApiResponse[UserPublic])
async def get_profile(current_user: CurrentUser = Depends(get_current_user)):
    return ApiResponse(data=current_user)


@router.put("/profile", response_model=ApiResponse[UserPublic])
async def update_profile(
    update_data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    user = await user_service.update_profile(db, current_user.id, update_data)
    return ApiResponse(message="Profile updated successfully", data=user)


@router.delete("/profile", response_model=ApiResponse, response_model_exclude_none=True)
async def delete_profile(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    await user_service.delete_profile(db, current_user.id)
    return ApiResponse(message="Profile deleted successfully")
