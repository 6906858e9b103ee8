"""
视频生成业务处理器
将视频生成服务的异常转换为HTTP异常
"""

from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.log_utils import get_logger
from app.core.storage.exceptions import StorageError
from app.models.user import User
from app.services.video.generation_service import SourceImage, VideoGenerationService

logger = get_logger(__name__)


class VideoGenerationHandler:
    """视频生成业务处理器"""

    def __init__(self, db: AsyncSession, service: Optional[VideoGenerationService] = None):
        self.db = db
        self.service = service or VideoGenerationService(db)

    async def handle_create_task(
        self,
        user: User,
        files: List[SourceImage],
        prompt: str,
        animation_style: Optional[str],
        model_id: Optional[str]
    ) -> Dict[str, Any]:
        try:
            return await self.service.create_task(
                user, files, prompt=prompt, animation_style=animation_style, model_id=model_id
            )
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            logger.error("创建视频生成任务失败", user_id=user.id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to start video generation"
            ) from e

    async def handle_get_task(self, task_id: str, user: User) -> Dict[str, Any]:
        task = await self.service.get_task(task_id, user)
        if not task:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
        return task

    async def handle_cancel_task(self, task_id: str, user: User) -> Dict[str, Any]:
        try:
            task = await self.service.cancel_task(task_id, user)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

        if not task:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
        return task

    async def handle_list_videos(self, user: User, skip: int, limit: int) -> Dict[str, Any]:
        try:
            videos = await self.service.list_videos(user, skip=skip, limit=limit)
        except Exception as e:
            logger.error("获取视频列表失败", user_id=user.id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load videos"
            ) from e
        return {"items": videos, "total": len(videos)}

    async def handle_get_video_content(self, video_id: str, user: User) -> Tuple[bytes, str, str]:
        try:
            content = await self.service.get_video_content(video_id, user)
        except StorageError as e:
            logger.error("读取视频文件失败", video_id=video_id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Video file is no longer available"
            ) from e

        if content is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")
        return content

    async def handle_delete_video(self, video_id: str, user: User) -> None:
        try:
            deleted = await self.service.delete_video(video_id, user)
        except Exception as e:
            logger.error("删除视频失败", video_id=video_id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete video"
            ) from e

        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")
