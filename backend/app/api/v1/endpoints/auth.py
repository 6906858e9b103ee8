"""
认证API端点
注册、登录、当前用户、找回/重置密码、Google Drive 设置
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.database import get_db
from app.models.user import User
from app.schemas.auth import (
    DriveSettingsRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
)
from app.schemas.common import StandardResponse
from app.services.auth.auth_service import user_to_dict
from app.services.auth.handler import AuthHandler

router = APIRouter(tags=["用户认证"])


@router.post(
    "/signup",
    response_model=StandardResponse,
    summary="用户注册",
    description="使用邮箱和密码注册，成功后直接返回访问令牌"
)
async def signup(
    request: SignupRequest,
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = AuthHandler(db)
    session = await handler.handle_signup(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name
    )
    return StandardResponse(status="success", message="Account created", data=session)


@router.post(
    "/login",
    response_model=StandardResponse,
    summary="用户登录"
)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = AuthHandler(db)
    session = await handler.handle_login(request.email, request.password)
    return StandardResponse(status="success", message="Signed in", data=session)


@router.get(
    "/me",
    response_model=StandardResponse,
    summary="获取当前用户"
)
async def get_me(user: User = Depends(get_current_user)) -> StandardResponse:
    return StandardResponse(status="success", message="", data=user_to_dict(user))


@router.post(
    "/forgot-password",
    response_model=StandardResponse,
    summary="找回密码",
    description="为已注册邮箱生成一次性重置令牌（邮件投递不在本服务范围内，令牌写入日志）"
)
async def forgot_password(
    request: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = AuthHandler(db)
    await handler.handle_forgot_password(request.email)
    return StandardResponse(
        status="success",
        message="Password reset instructions have been sent to your email"
    )


@router.post(
    "/reset-password",
    response_model=StandardResponse,
    summary="重置密码"
)
async def reset_password(
    request: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = AuthHandler(db)
    await handler.handle_reset_password(request.token, request.new_password)
    return StandardResponse(status="success", message="Password has been reset")


@router.put(
    "/drive-settings",
    response_model=StandardResponse,
    summary="更新 Google Drive 同步设置"
)
async def update_drive_settings(
    request: DriveSettingsRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = AuthHandler(db)
    updated = await handler.handle_update_drive_settings(user, request.enabled, request.access_token)
    return StandardResponse(status="success", message="Google Drive settings updated", data=updated)
