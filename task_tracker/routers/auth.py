from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.dependencies import get_current_user, get_db, get_token_service
from task_tracker.schemas.common import ApiResponse
from task_tracker.schemas.user import (
    AccessTokenData,
    AuthData,
    CurrentUser,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
)
from task_tracker.services import auth as auth_service
from task_tracker.services.tokens import TokenService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    data = await auth_service.register(db, tokens, body.name, body.email, body.password)
    return ApiResponse(message="User registered successfully", data=data)


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    data = await auth_service.login(db, tokens, body.email, body.password)
    return ApiResponse(message="Login successful", data=data)


@router.post("/refresh", response_model=ApiResponse[AccessTokenData])
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    access_token = await auth_service.refresh_access_token(db, tokens, body.refresh_token)
    return ApiResponse(
        message="Token refreshed successfully",
        data=AccessTokenData(access_token=access_token),
    )


@router.post("/logout", response_model=ApiResponse, response_model_exclude_none=True)
async def logout(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    await auth_service.logout(db, current_user.id)
    return ApiResponse(message="Logout successful")
