"""
认证服务
注册、登录、令牌校验、找回与重置密码、默认超级管理员
"""

from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.log_messages import log_messages
from app.core.log_utils import get_logger
from app.core.security import (
    AuthError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models.user import User, UserRole
from app.repositories.password_reset_token import PasswordResetTokenRepository
from app.repositories.user import UserRepository
from app.utils.datetime_utils import format_datetime_iso, is_expired, utc_now
from app.utils.id_utils import generate_reset_token

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def user_to_dict(user: User) -> Dict[str, Any]:
    """用户对外展示字段（不含密码哈希与Drive令牌）"""
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "drive_enabled": bool(user.drive_enabled),
        "created_at": format_datetime_iso(user.created_at),
        "last_login": format_datetime_iso(user.last_login),
    }


class AuthService:
    """认证服务"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.reset_tokens = PasswordResetTokenRepository(db)

    @staticmethod
    def _validate_password(password: str) -> None:
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    async def signup(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None
    ) -> Tuple[User, str]:
        """
        注册新用户

        Returns:
            (用户, 访问令牌)

        Raises:
            ValueError: 邮箱已注册或密码不合规
        """
        email = email.strip().lower()
        self._validate_password(password)

        if await self.users.get_by_email(email):
            raise ValueError("User with this email already exists")

        user = await self.users.create(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=UserRole.USER.value,
            last_login=utc_now()
        )
        logger.info(log_messages.AUTH_SIGNUP_SUCCESS, user_id=user.id)
        return user, create_access_token(user.id, user.role)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        邮箱密码登录，成功后更新 last_login

        Raises:
            AuthError: 邮箱不存在或密码错误（统一提示）
        """
        user = await self.users.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(log_messages.AUTH_LOGIN_FAILED, email_domain=email.rsplit("@", 1)[-1])
            raise AuthError("Invalid email or password", code="INVALID_CREDENTIALS")

        user = await self.users.update(user.id, last_login=utc_now())
        logger.info(log_messages.AUTH_LOGIN_SUCCESS, user_id=user.id)
        return user, create_access_token(user.id, user.role)

    async def get_user_from_token(self, token: str) -> User:
        """
        根据访问令牌获取当前用户

        Raises:
            AuthError: 令牌无效、过期或用户已被删除
        """
        payload = decode_access_token(token)
        user = await self.users.get_by_id(payload["sub"])
        if user is None:
            logger.warning(log_messages.AUTH_TOKEN_INVALID, reason="user_not_found")
            raise AuthError("User no longer exists", code="USER_NOT_FOUND")
        return user

    async def forgot_password(self, email: str) -> Optional[str]:
        """
        创建密码重置令牌

        不发送邮件，令牌写入日志供开发环境使用。

        Returns:
            令牌；邮箱未注册时返回None
        """
        user = await self.users.get_by_email(email)
        if not user:
            return None

        await self.reset_tokens.invalidate_for_user(user.id)
        token = generate_reset_token()
        await self.reset_tokens.create(
            user_id=user.id,
            token=token,
            expires_at=utc_now() + timedelta(minutes=settings.password_reset_expire_minutes),
            used=False
        )
        logger.info(
            "密码重置令牌已生成",
            user_id=user.id,
            reset_token=token,
            reset_link=f"/reset-password?token={token}"
        )
        return token

    async def reset_password(self, token: str, new_password: str) -> User:
        """
        使用重置令牌设置新密码，令牌只能使用一次

        Raises:
            AuthError: 令牌不存在、已使用或已过期
            ValueError: 新密码不合规
        """
        self._validate_password(new_password)

        record = await self.reset_tokens.get_by_token(token)
        if not record or record.used or is_expired(record.expires_at):
            raise AuthError("Invalid or expired reset token", code="RESET_TOKEN_INVALID")

        user = await self.users.update(record.user_id, password_hash=hash_password(new_password))
        if user is None:
            raise AuthError("Invalid or expired reset token", code="RESET_TOKEN_INVALID")

        await self.reset_tokens.update(record.id, used=True)
        logger.info("密码重置成功", user_id=user.id)
        return user

    async def update_drive_settings(
        self,
        user: User,
        enabled: bool,
        access_token: Optional[str] = None
    ) -> User:
        """开启或关闭Google Drive同步；关闭时清除已保存的令牌"""
        if enabled and not (access_token or user.drive_access_token):
            raise ValueError("A Google Drive access token is required to enable Drive storage")

        fields: Dict[str, Any] = {"drive_enabled": enabled}
        if not enabled:
            fields["drive_access_token"] = None
        elif access_token:
            fields["drive_access_token"] = access_token

        return await self.users.update(user.id, **fields)

    async def ensure_default_admin(self) -> Optional[User]:
        """默认超级管理员不存在时创建，已存在则不做修改"""
        if not settings.create_default_admin:
            return None

        existing = await self.users.get_by_email(settings.default_admin_email)
        if existing:
            return existing

        admin = await self.users.create(
            email=settings.default_admin_email.lower(),
            password_hash=hash_password(settings.default_admin_password),
            first_name="Super",
            last_name="Admin",
            role=UserRole.SUPER_ADMIN.value
        )
        logger.info("默认超级管理员已创建", user_id=admin.id)
        return admin
