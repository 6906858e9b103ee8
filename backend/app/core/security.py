"""
安全工具模块
密码哈希（bcrypt）与访问令牌（HS256 JWT）
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from app.core.config import settings


class AuthError(Exception):
    """认证失败（凭据错误、令牌无效或过期）"""

    def __init__(self, message: str, code: str = "AUTH_ERROR") -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


def hash_password(password: str) -> str:
    """生成bcrypt密码哈希"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """校验密码，哈希格式非法时视为不匹配"""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    user_id: str,
    role: str,
    expires_minutes: Optional[int] = None,
    now: Optional[datetime] = None
) -> str:
    """
    签发访问令牌

    Args:
        user_id: 用户ID（写入 sub）
        role: 用户角色
        expires_minutes: 有效期（分钟），默认 ACCESS_TOKEN_EXPIRE_MINUTES
        now: 签发时间，测试中用于构造过期令牌
    """
    issued_at = now or datetime.now(timezone.utc)
    expire = issued_at + timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {
        "sub": user_id,
        "role": role,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    校验并解析访问令牌

    Raises:
        AuthError: 令牌过期、签名错误或缺少 sub
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": ["sub", "exp"]}
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired", code="TOKEN_EXPIRED") from e
    except jwt.InvalidTokenError as e:
        raise AuthError("Invalid token", code="TOKEN_INVALID") from e
    return payload
