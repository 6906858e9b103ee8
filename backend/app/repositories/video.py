"""
生成视频数据访问层
"""

from typing import List, Optional

from sqlalchemy import select, delete

from app.models.video import Video
from .base import BaseRepository


class VideoRepository(BaseRepository):
    """视频Repository"""

    @property
    def model(self):
        return Video

    async def list_by_user(self, user_id: str, skip: int = 0, limit: int = 100) -> List[Video]:
        """获取用户的视频，最新的在前"""
        query = (
            select(Video)
            .where(Video.user_id == user_id)
            .order_by(Video.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_user_video(self, video_id: str, user_id: str) -> Optional[Video]:
        """获取属于指定用户的视频"""
        query = select(Video).where(Video.id == video_id, Video.user_id == user_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def delete_by_user(self, user_id: str) -> int:
        """删除用户的全部视频记录，返回删除数量"""
        result = await self.db.execute(delete(Video).where(Video.user_id == user_id))
        await self.db.commit()
        return result.rowcount or 0
