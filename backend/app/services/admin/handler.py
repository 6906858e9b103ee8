"""
管理后台业务处理器
"""

from typing import Any, Dict

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.log_utils import get_logger
from app.services.admin.admin_service import AdminService

logger = get_logger(__name__)


class AdminHandler:
    """管理后台业务处理器"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.admin_service = AdminService(db)

    async def handle_get_analytics(self) -> Dict[str, int]:
        try:
            return await self.admin_service.get_analytics()
        except Exception as e:
            logger.error("获取运营统计失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load analytics"
            ) from e

    async def handle_list_users(self, skip: int, limit: int) -> Dict[str, Any]:
        try:
            users = await self.admin_service.list_users(skip=skip, limit=limit)
            return {"items": users, "total": len(users)}
        except Exception as e:
            logger.error("获取用户列表失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load users"
            ) from e

    async def handle_delete_user(self, user_id: str, admin_id: str) -> None:
        try:
            deleted = await self.admin_service.delete_user(user_id, acting_admin_id=admin_id)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            logger.error("删除用户失败", user_id=user_id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete user"
            ) from e

        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
