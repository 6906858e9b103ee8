"""
管理后台服务
运营统计与用户管理
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.log_utils import get_logger
from app.core.storage import get_video_storage
from app.core.storage.exceptions import StorageError
from app.repositories.user import UserRepository
from app.repositories.video import VideoRepository
from app.services.auth.auth_service import user_to_dict
from app.utils.datetime_utils import days_ago, get_month_start, get_today_start, get_week_start, utc_now

logger = get_logger(__name__)


class AdminService:
    """管理后台服务"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.videos = VideoRepository(db)

    async def get_analytics(self) -> Dict[str, int]:
        """
        运营统计

        new_*_this_month 统计最近30天，videos_this_month 统计自然月
        """
        now = utc_now()
        last_30_days = days_ago(30, now)
        return {
            "total_users": await self.users.count(),
            "total_videos": await self.videos.count(),
            "new_users_this_month": await self.users.count(created_after=last_30_days),
            "new_videos_this_month": await self.videos.count(created_after=last_30_days),
            "videos_today": await self.videos.count(created_after=get_today_start(now)),
            "videos_this_week": await self.videos.count(created_after=get_week_start(now)),
            "videos_this_month": await self.videos.count(created_after=get_month_start(now)),
        }

    async def list_users(self, skip: int = 0, limit: int = 100) -> List[Dict[str, Any]]:
        users = await self.users.list_users(skip=skip, limit=limit)
        return [user_to_dict(user) for user in users]

    async def delete_user(self, user_id: str, acting_admin_id: Optional[str] = None) -> bool:
        """
        删除用户及其全部视频（含本地文件）

        Raises:
            ValueError: 管理员试图删除自己
        """
        if acting_admin_id and acting_admin_id == user_id:
            raise ValueError("You cannot delete your own account")

        user = await self.users.get_by_id(user_id)
        if not user:
            return False

        videos = await self.videos.list_by_user(user_id, limit=10000)
        storage = get_video_storage()
        for video in videos:
            try:
                await storage.delete(video.storage_key)
            except StorageError as e:
                logger.warning("删除用户视频文件失败", video_id=video.id, error=str(e))

        deleted_videos = await self.videos.delete_by_user(user_id)
        await self.users.delete(user_id)

        logger.info(
            "用户已删除",
            user_id=user_id,
            deleted_videos=deleted_videos,
            acting_admin_id=acting_admin_id
        )
        return True
