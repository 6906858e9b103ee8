"""
API公共依赖
当前用户解析、超级管理员校验、站点开放状态拦截
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.log_utils import get_logger
from app.core.security import AuthError
from app.db.database import get_db
from app.models.user import User
from app.services.auth.auth_service import AuthService
from app.services.site.site_settings_service import SiteSettingsService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """解析 Authorization: Bearer <token>，失败返回401"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        return await AuthService(db).get_user_from_token(credentials.credentials)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"}
        ) from e


async def require_super_admin(user: User = Depends(get_current_user)) -> User:
    """仅超级管理员可访问"""
    if not user.is_super_admin:
        logger.warning("非管理员访问管理接口", user_id=user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Super admin access required")
    return user


async def site_gate(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> User:
    """站点关闭或维护中时拦截普通用户（503），超级管理员不受影响"""
    if user.is_super_admin:
        return user

    block = await SiteSettingsService(db).get_block_reason()
    if block:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=block)
    return user
