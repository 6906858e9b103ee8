"""
认证业务处理器
将认证服务的异常转换为HTTP异常
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.log_utils import get_logger
from app.core.security import AuthError
from app.models.user import User
from app.services.auth.auth_service import AuthService, user_to_dict

logger = get_logger(__name__)


class AuthHandler:
    """认证业务处理器"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.auth_service = AuthService(db)

    @staticmethod
    def _session_payload(user: User, token: str) -> Dict[str, Any]:
        return {
            "access_token": token,
            "token_type": "bearer",
            "user": user_to_dict(user),
        }

    async def handle_signup(
        self,
        email: str,
        password: str,
        first_name: Optional[str],
        last_name: Optional[str]
    ) -> Dict[str, Any]:
        try:
            user, token = await self.auth_service.signup(email, password, first_name, last_name)
            return self._session_payload(user, token)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            logger.error("用户注册失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create user"
            ) from e

    async def handle_login(self, email: str, password: str) -> Dict[str, Any]:
        try:
            user, token = await self.auth_service.login(email, password)
            return self._session_payload(user, token)
        except AuthError as e:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
        except Exception as e:
            logger.error("用户登录失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Login failed"
            ) from e

    async def handle_forgot_password(self, email: str) -> None:
        try:
            token = await self.auth_service.forgot_password(email)
        except Exception as e:
            logger.error("处理找回密码失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to process password reset request"
            ) from e

        if token is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No account found with this email address"
            )

    async def handle_reset_password(self, token: str, new_password: str) -> None:
        try:
            await self.auth_service.reset_password(token, new_password)
        except (AuthError, ValueError) as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            logger.error("重置密码失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to reset password"
            ) from e

    async def handle_update_drive_settings(
        self,
        user: User,
        enabled: bool,
        access_token: Optional[str]
    ) -> Dict[str, Any]:
        try:
            updated = await self.auth_service.update_drive_settings(user, enabled, access_token)
            return user_to_dict(updated)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            logger.error("更新Google Drive设置失败", user_id=user.id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update Google Drive settings"
            ) from e
