"""
视频生成任务数据访问层
"""

from typing import List, Optional

from sqlalchemy import select

from app.models.video_generation_task import VideoGenerationTask
from .base import BaseRepository


class VideoGenerationTaskRepository(BaseRepository):
    """视频生成任务Repository"""

    @property
    def model(self):
        return VideoGenerationTask

    async def get_user_task(self, task_id: str, user_id: str) -> Optional[VideoGenerationTask]:
        """获取属于指定用户的任务"""
        query = select(VideoGenerationTask).where(
            VideoGenerationTask.id == task_id,
            VideoGenerationTask.user_id == user_id
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def list_by_user(self, user_id: str, limit: int = 20) -> List[VideoGenerationTask]:
        query = (
            select(VideoGenerationTask)
            .where(VideoGenerationTask.user_id == user_id)
            .order_by(VideoGenerationTask.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def is_cancel_requested(self, task_id: str) -> bool:
        """读取最新的取消标记（绕过会话缓存）"""
        query = select(VideoGenerationTask.cancel_requested).where(
            VideoGenerationTask.id == task_id
        )
        result = await self.db.execute(query)
        return bool(result.scalar())
