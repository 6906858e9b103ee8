"""
站点设置服务
站点开放状态与维护模式，存储在 site_settings 表中
"""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.log_utils import get_logger
from app.repositories.site_setting import SiteSettingRepository

logger = get_logger(__name__)

SITE_ACCESS_KEY = "site_access"
MAINTENANCE_KEY = "maintenance"

DEFAULT_MAINTENANCE = {
    "is_maintenance_mode": False,
    "maintenance_title": "Site Under Maintenance",
    "maintenance_message": "We are currently performing scheduled maintenance. Please check back soon.",
    "estimated_completion": None,
}

SITE_DISABLED_MESSAGE = "Site access is temporarily disabled. Please check back later."


class SiteSettingsService:
    """站点设置服务"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = SiteSettingRepository(db)

    async def get_site_access(self) -> bool:
        """站点是否开放，从未设置过时默认开放"""
        value = await self.repository.get_value(SITE_ACCESS_KEY)
        if value is None:
            return True
        return bool(value.get("enabled", True))

    async def set_site_access(self, enabled: bool, updated_by: Optional[str] = None) -> bool:
        await self.repository.set_value(SITE_ACCESS_KEY, {"enabled": enabled}, updated_by=updated_by)
        logger.info("站点访问状态已更新", enabled=enabled, updated_by=updated_by)
        return enabled

    async def get_maintenance(self) -> Dict[str, Any]:
        """维护模式设置，缺失字段使用默认值"""
        stored = await self.repository.get_value(MAINTENANCE_KEY) or {}
        merged = dict(DEFAULT_MAINTENANCE)
        merged.update({k: v for k, v in stored.items() if k in DEFAULT_MAINTENANCE})
        return merged

    async def set_maintenance(
        self,
        updates: Dict[str, Any],
        updated_by: Optional[str] = None
    ) -> Dict[str, Any]:
        """部分更新维护模式设置，未知字段忽略"""
        current = await self.get_maintenance()
        current.update({k: v for k, v in updates.items() if k in DEFAULT_MAINTENANCE})
        await self.repository.set_value(MAINTENANCE_KEY, current, updated_by=updated_by)
        logger.info(
            "维护模式设置已更新",
            is_maintenance_mode=current["is_maintenance_mode"],
            updated_by=updated_by
        )
        return current

    async def get_status(self) -> Dict[str, Any]:
        """公开的站点状态（供前端决定是否展示维护页）"""
        maintenance = await self.get_maintenance()
        return {
            "site_access_enabled": await self.get_site_access(),
            **maintenance,
        }

    async def get_block_reason(self) -> Optional[Dict[str, Any]]:
        """
        普通用户当前是否被拦截

        Returns:
            被拦截时返回 {"title", "message", "estimated_completion"}，否则返回None
        """
        maintenance = await self.get_maintenance()
        if maintenance["is_maintenance_mode"]:
            return {
                "title": maintenance["maintenance_title"],
                "message": maintenance["maintenance_message"],
                "estimated_completion": maintenance["estimated_completion"],
            }
        if not await self.get_site_access():
            return {
                "title": "Site Unavailable",
                "message": SITE_DISABLED_MESSAGE,
                "estimated_completion": None,
            }
        return None
