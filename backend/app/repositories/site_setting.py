"""
站点设置数据访问层
"""

from typing import Any, Dict, Optional

from app.models.site_setting import SiteSetting
from app.core.log_utils import get_logger
from .base import BaseRepository

logger = get_logger(__name__)


class SiteSettingRepository(BaseRepository):
    """站点设置Repository（键值存储）"""

    @property
    def model(self):
        return SiteSetting

    async def get_value(self, key: str) -> Optional[Dict[str, Any]]:
        """读取设置值，未设置时返回None"""
        record = await self.get_by_id(key)
        return dict(record.value) if record else None

    async def set_value(
        self,
        key: str,
        value: Dict[str, Any],
        updated_by: Optional[str] = None
    ) -> SiteSetting:
        """写入设置值（不存在则创建）"""
        record = await self.get_by_id(key)
        if record is None:
            return await self.create(key=key, value=value, updated_by=updated_by)

        try:
            record.value = value
            record.updated_by = updated_by
            await self.db.commit()
            await self.db.refresh(record)
        except Exception as e:
            await self.db.rollback()
            logger.error("站点设置写入失败", setting_key=key, exception=e)
            raise
        return record
