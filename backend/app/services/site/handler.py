"""
站点设置业务处理器
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.log_utils import get_logger
from app.services.site.site_settings_service import SiteSettingsService

logger = get_logger(__name__)


class SiteSettingsHandler:
    """站点设置业务处理器"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.service = SiteSettingsService(db)

    async def handle_get_status(self) -> Dict[str, Any]:
        try:
            return await self.service.get_status()
        except Exception as e:
            logger.error("获取站点状态失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load site status"
            ) from e

    async def handle_set_site_access(self, enabled: bool, admin_id: str) -> Dict[str, Any]:
        try:
            enabled = await self.service.set_site_access(enabled, updated_by=admin_id)
            return {"site_access_enabled": enabled}
        except Exception as e:
            logger.error("更新站点访问状态失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update site access"
            ) from e

    async def handle_get_maintenance(self) -> Dict[str, Any]:
        try:
            return await self.service.get_maintenance()
        except Exception as e:
            logger.error("获取维护模式设置失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load maintenance settings"
            ) from e

    async def handle_set_maintenance(
        self,
        updates: Dict[str, Any],
        admin_id: Optional[str]
    ) -> Dict[str, Any]:
        try:
            return await self.service.set_maintenance(updates, updated_by=admin_id)
        except Exception as e:
            logger.error("更新维护模式设置失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update maintenance settings"
            ) from e
