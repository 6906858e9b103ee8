"""
360°视频生成服务

API进程负责校验输入、保存源图片、创建任务并投递到Celery；
worker 进程执行 run_task：编码 -> 远程生成（进度写回任务表）-> 下载 -> 保存 -> 入库。
"""

import asyncio
import mimetypes
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.ai.config import ModelConfig
from app.core.ai.exceptions import GenerationCancelledError, VideoGenerationError
from app.core.ai.factory import AIProviderFactory
from app.core.ai.generation_client import GenerationClient, PollingPolicy, ProgressMessages
from app.core.ai.models import GeneratedArtifact, GenerationRequest, ModelCapability
from app.core.ai.result_fetcher import ResultFetcher
from app.core.config import settings
from app.core.log_messages import log_messages
from app.core.log_utils import get_logger
from app.core.storage import BaseStorage, get_drive_storage, get_upload_storage, get_video_storage
from app.core.storage.exceptions import StorageError
from app.db.database import AsyncSessionLocal
from app.models.user import User
from app.models.video import Video
from app.models.video_generation_task import TaskStatus, VideoGenerationTask
from app.repositories.user import UserRepository
from app.repositories.video import VideoRepository
from app.repositories.video_generation_task import VideoGenerationTaskRepository
from app.services.ai_model.management_service import ManagementService
from app.utils.datetime_utils import format_datetime_iso, utc_now
from app.utils.id_utils import generate_task_id, generate_video_id

logger = get_logger(__name__)

ANIMATION_STYLE_PROMPTS = {
    "Slow Spin": "Create a video with a slow, smooth 360-degree spin of the object.",
    "Fast Spin": "Create a video with a fast, dynamic 360-degree spin of the object.",
    "Orbit": "Create a video where the camera orbits around the object, showing it from all angles.",
}
DEFAULT_STYLE_PROMPT = "Create a 360-degree video of the object."

COMPLETED_MESSAGE = "Video generated successfully!"
CANCELLED_MESSAGE = "Video generation was cancelled."
FAILURE_PREFIX = "Failed to generate the video."

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/bmp": ".bmp",
    "image/webp": ".webp",
}

def build_instruction(prompt: Optional[str], animation_style: Optional[str]) -> str:
    """动画风格描述 + 用户提示词"""
    style_sentence = ANIMATION_STYLE_PROMPTS.get(animation_style or "", DEFAULT_STYLE_PROMPT)
    return f"{style_sentence} {(prompt or '').strip()}".strip()


@dataclass(frozen=True)
class SourceImage:
    """上传的源图片"""
    filename: str
    content_type: str
    data: bytes


def task_to_dict(task: VideoGenerationTask) -> Dict[str, Any]:
    return {
        "task_id": task.id,
        "status": task.status,
        "progress_message": task.progress_message,
        "poll_count": task.poll_count or 0,
        "error_message": task.error_message,
        "video_id": task.video_id,
        "prompt": task.prompt,
        "animation_style": task.animation_style,
        "created_at": format_datetime_iso(task.created_at),
        "started_at": format_datetime_iso(task.started_at),
        "completed_at": format_datetime_iso(task.completed_at),
    }


def video_to_dict(video: Video) -> Dict[str, Any]:
    return {
        "id": video.id,
        "prompt": video.prompt,
        "animation_style": video.animation_style,
        "mime_type": video.mime_type,
        "file_size": video.file_size,
        "content_url": f"{settings.api_v1_str}/videos/{video.id}/content",
        "drive_file_id": video.drive_file_id,
        "drive_view_link": video.drive_view_link,
        "drive_download_link": video.drive_download_link,
        "is_stored_in_drive": bool(video.is_stored_in_drive),
        "created_at": format_datetime_iso(video.created_at),
    }


def build_generation_client(model_config: ModelConfig) -> GenerationClient:
    """按模型配置组装 Provider、结果下载器与轮询策略"""
    provider = AIProviderFactory.create(model_config, ModelCapability.VIDEO_GEN)
    fetcher = ResultFetcher(
        api_key=model_config.api_key,
        auth_mode=settings.video_fetch_auth_mode,
        timeout=settings.video_fetch_timeout
    )
    return GenerationClient(
        provider=provider,
        fetcher=fetcher,
        policy=PollingPolicy.from_settings(settings),
        max_source_images=settings.max_source_images
    )


def dispatch_generation_task(task_id: str) -> str:
    """投递Celery任务，返回Celery任务ID"""
    from app.services.tasks.video_generation_tasks import generate_video_task

    return generate_video_task.delay(task_id).id


class VideoGenerationService:
    """
    视频生成服务

    Args:
        db: 数据库会话
        upload_storage: 源图片存储
        video_storage: 生成视频存储
        client_factory: 根据模型配置构建 GenerationClient
        dispatcher: 投递后台任务，返回后台任务ID
        drive_factory: 根据 (user_id, access_token) 构建 Google Drive 存储
        cancel_check_interval: worker 检查取消标记的间隔，None 表示不检查
    """

    def __init__(
        self,
        db: AsyncSession,
        upload_storage: Optional[BaseStorage] = None,
        video_storage: Optional[BaseStorage] = None,
        client_factory: Callable[[ModelConfig], GenerationClient] = build_generation_client,
        dispatcher: Callable[[str], str] = dispatch_generation_task,
        drive_factory: Callable[[str, str], BaseStorage] = get_drive_storage,
        cancel_check_interval: Optional[float] = settings.video_cancel_check_interval
    ):
        self.db = db
        self.tasks = VideoGenerationTaskRepository(db)
        self.videos = VideoRepository(db)
        self.users = UserRepository(db)
        self.upload_storage = upload_storage or get_upload_storage()
        self.video_storage = video_storage or get_video_storage()
        self.client_factory = client_factory
        self.dispatcher = dispatcher
        self.drive_factory = drive_factory
        self.cancel_check_interval = cancel_check_interval

    # ==================== API进程 ====================

    def _validate_sources(self, files: List[SourceImage]) -> None:
        if not files:
            raise ValueError("Please upload at least one image")
        if len(files) > settings.max_source_images:
            raise ValueError(f"You can upload at most {settings.max_source_images} images")

        for index, source in enumerate(files, start=1):
            if source.content_type not in settings.supported_image_mime_types:
                raise ValueError(f"Image #{index} has an unsupported type: {source.content_type}")
            if not source.data:
                raise ValueError(f"Image #{index} is empty")
            if len(source.data) > settings.max_image_size:
                raise ValueError(
                    f"Image #{index} exceeds the {settings.max_image_size // (1024 * 1024)}MB limit"
                )

    async def create_task(
        self,
        user: User,
        files: List[SourceImage],
        prompt: str = "",
        animation_style: Optional[str] = None,
        model_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        创建视频生成任务并投递到后台

        Raises:
            ValueError: 图片数量、类型、大小不合法，或指定的模型不可用
        """
        self._validate_sources(files)
        if model_id:
            await ManagementService(self.db).get_video_model_config(model_id)

        task_id = generate_task_id()
        source_keys = []
        for index, source in enumerate(files):
            extension = IMAGE_EXTENSIONS.get(source.content_type, ".img")
            key = f"{task_id}/source_{index}{extension}"
            await self.upload_storage.upload(source.data, key, source.content_type)
            source_keys.append(key)

        task = await self.tasks.create(
            id=task_id,
            user_id=user.id,
            prompt=(prompt or "").strip(),
            animation_style=animation_style,
            model_id=model_id,
            source_keys=source_keys,
            status=TaskStatus.PENDING.value,
            progress_message="Waiting for an available worker..."
        )

        celery_task_id = self.dispatcher(task_id)
        task = await self.tasks.update(task_id, celery_task_id=celery_task_id)

        logger.info(
            log_messages.VIDEO_TASK_CREATED,
            task_id=task_id,
            user_id=user.id,
            image_count=len(files),
            animation_style=animation_style,
            celery_task_id=celery_task_id
        )
        return task_to_dict(task)

    async def get_task(self, task_id: str, user: User) -> Optional[Dict[str, Any]]:
        task = await self.tasks.get_user_task(task_id, user.id)
        return task_to_dict(task) if task else None

    async def cancel_task(self, task_id: str, user: User) -> Optional[Dict[str, Any]]:
        """
        请求取消任务

        排队中的任务直接标记为已取消；执行中的任务设置取消标记，
        由 worker 停止轮询（远程生成不会被取消）。

        Raises:
            ValueError: 任务已结束
        """
        task = await self.tasks.get_user_task(task_id, user.id)
        if not task:
            return None
        if task.is_finished:
            raise ValueError(f"Task is already {task.status}")

        if task.status == TaskStatus.PENDING.value:
            task = await self.tasks.update(
                task_id,
                cancel_requested=True,
                status=TaskStatus.CANCELLED.value,
                progress_message=CANCELLED_MESSAGE,
                completed_at=utc_now()
            )
        else:
            task = await self.tasks.update(task_id, cancel_requested=True)

        logger.info(log_messages.VIDEO_TASK_CANCELLED, task_id=task_id, status=task.status)
        return task_to_dict(task)

    async def list_videos(self, user: User, skip: int = 0, limit: int = 100) -> List[Dict[str, Any]]:
        videos = await self.videos.list_by_user(user.id, skip=skip, limit=limit)
        return [video_to_dict(video) for video in videos]

    async def _get_accessible_video(self, video_id: str, user: User) -> Optional[Video]:
        if user.is_super_admin:
            return await self.videos.get_by_id(video_id)
        return await self.videos.get_user_video(video_id, user.id)

    async def get_video_content(self, video_id: str, user: User) -> Optional[Tuple[bytes, str, str]]:
        """
        读取视频文件

        Returns:
            (数据, MIME类型, 下载文件名)；视频不存在返回None
        """
        video = await self._get_accessible_video(video_id, user)
        if not video:
            return None
        result = await self.video_storage.download(video.storage_key)
        filename = f"pixshop-360-{video.id}{self._video_extension(video.mime_type)}"
        return result.data, video.mime_type or result.mime_type, filename

    async def delete_video(self, video_id: str, user: User) -> bool:
        """删除视频记录、本地文件以及 Google Drive 副本"""
        video = await self._get_accessible_video(video_id, user)
        if not video:
            return False

        await self.video_storage.delete(video.storage_key)

        if video.drive_file_id:
            owner = user if video.user_id == user.id else await self.users.get_by_id(video.user_id)
            if owner and owner.drive_access_token:
                try:
                    await self.drive_factory(owner.id, owner.drive_access_token).delete(video.drive_file_id)
                except StorageError as e:
                    logger.warning("删除Google Drive副本失败", video_id=video.id, error=str(e))

        await self.videos.delete(video.id)
        logger.info("视频已删除", video_id=video.id, user_id=user.id)
        return True

    # ==================== worker进程 ====================

    async def run_task(self, task_id: str) -> Optional[Dict[str, Any]]:
        """
        执行视频生成任务（在Celery worker中调用）

        已知错误（解码、生成、下载、超时、存储、配置）标记任务失败，
        取消标记任务为已取消，均不向上抛出。
        """
        task = await self.tasks.get_by_id(task_id)
        if not task:
            logger.warning("视频生成任务不存在", task_id=task_id)
            return None
        if task.is_finished:
            logger.info("视频生成任务已结束，跳过", task_id=task_id, status=task.status)
            return task_to_dict(task)
        if task.cancel_requested:
            return await self._mark_cancelled(task_id)

        logger.info(log_messages.VIDEO_TASK_START, task_id=task_id, user_id=task.user_id)
        task = await self.tasks.update(
            task_id,
            status=TaskStatus.PROCESSING.value,
            started_at=utc_now(),
            progress_message=ProgressMessages.PREPARING
        )

        cancel_event = asyncio.Event()
        watcher = None
        if self.cancel_check_interval:
            watcher = asyncio.create_task(self._watch_cancellation(task_id, cancel_event))

        client = None
        try:
            user = await self.users.get_by_id(task.user_id)
            if user is None:
                raise ValueError("The task owner no longer exists")

            sources = []
            for key in task.source_keys or []:
                sources.append((await self.upload_storage.download(key)).data)

            model_config = await ManagementService(self.db).get_video_model_config(task.model_id)
            client = self.client_factory(model_config)

            request = GenerationRequest(
                source_images=sources,
                instruction_text=build_instruction(task.prompt, task.animation_style),
                model_selector=model_config.model_name
            )
            artifact = await client.generate(
                request,
                self._progress_recorder(task_id),
                cancel_event=cancel_event
            )

            video = await self._store_video(task, user, artifact)
            task = await self.tasks.update(
                task_id,
                status=TaskStatus.COMPLETED.value,
                video_id=video.id,
                progress_message=COMPLETED_MESSAGE,
                completed_at=utc_now()
            )
            logger.info(
                log_messages.VIDEO_TASK_SUCCESS,
                task_id=task_id,
                video_id=video.id,
                size_bytes=artifact.size
            )
            return task_to_dict(task)

        except GenerationCancelledError:
            return await self._mark_cancelled(task_id)
        except (VideoGenerationError, StorageError, ValueError) as e:
            return await self._mark_failed(task_id, str(e), e)
        except Exception as e:
            return await self._mark_failed(task_id, str(e) or "An unexpected error occurred.", e)
        finally:
            if watcher is not None:
                watcher.cancel()
                await asyncio.gather(watcher, return_exceptions=True)
            if client is not None:
                await client.provider.close()

    def _progress_recorder(self, task_id: str):
        """将进度文案与轮询次数写回任务表"""
        state = {"poll_count": 0}

        async def on_progress(message: str, poll_count: int) -> None:
            fields: Dict[str, Any] = {"progress_message": message}
            if poll_count != state["poll_count"]:
                state["poll_count"] = poll_count
                fields["poll_count"] = poll_count
            await self.tasks.update(task_id, **fields)

        return on_progress

    async def _watch_cancellation(self, task_id: str, cancel_event: asyncio.Event) -> None:
        """使用独立会话定期读取取消标记（主会话正被生成流程占用）"""
        while not cancel_event.is_set():
            await asyncio.sleep(self.cancel_check_interval)
            async with AsyncSessionLocal() as session:
                if await VideoGenerationTaskRepository(session).is_cancel_requested(task_id):
                    logger.info("检测到取消请求", task_id=task_id)
                    cancel_event.set()

    @staticmethod
    def _video_extension(mime_type: Optional[str]) -> str:
        return mimetypes.guess_extension(mime_type or "") or ".mp4"

    async def _store_video(
        self,
        task: VideoGenerationTask,
        user: User,
        artifact: GeneratedArtifact
    ) -> Video:
        """保存到本地，按用户设置同步到 Google Drive（失败不影响结果），写入 videos 表"""
        video_id = generate_video_id()
        extension = self._video_extension(artifact.mime_type)
        storage_key = f"{user.id}/{video_id}{extension}"
        await self.video_storage.upload(artifact.data, storage_key, artifact.mime_type)

        drive_fields: Dict[str, Any] = {}
        if settings.drive_enabled and user.drive_enabled and user.drive_access_token:
            try:
                drive = self.drive_factory(user.id, user.drive_access_token)
                uploaded = await drive.upload(
                    artifact.data,
                    f"pixshop-360-{video_id}{extension}",
                    artifact.mime_type,
                    metadata={
                        "description": f"360° video created with Pixshop on {format_datetime_iso(utc_now())}"
                    }
                )
                drive_fields = {
                    "drive_file_id": uploaded.key,
                    "drive_view_link": uploaded.url,
                    "drive_download_link": uploaded.download_url,
                    "is_stored_in_drive": True,
                }
            except StorageError as e:
                logger.warning("上传Google Drive失败，仅保存本地副本", task_id=task.id, error=str(e))

        return await self.videos.create(
            id=video_id,
            user_id=user.id,
            prompt=task.prompt or "",
            animation_style=task.animation_style,
            storage_key=storage_key,
            mime_type=artifact.mime_type,
            file_size=artifact.size,
            **drive_fields
        )

    async def _mark_cancelled(self, task_id: str) -> Dict[str, Any]:
        task = await self.tasks.update(
            task_id,
            status=TaskStatus.CANCELLED.value,
            progress_message=CANCELLED_MESSAGE,
            completed_at=utc_now()
        )
        logger.info(log_messages.VIDEO_TASK_CANCELLED, task_id=task_id)
        return task_to_dict(task)

    async def _mark_failed(self, task_id: str, reason: str, error: Exception) -> Dict[str, Any]:
        logger.error(log_messages.VIDEO_TASK_FAILED, task_id=task_id, exception=error)
        task = await self.tasks.update(
            task_id,
            status=TaskStatus.FAILED.value,
            error_message=f"{FAILURE_PREFIX} {reason}",
            completed_at=utc_now()
        )
        return task_to_dict(task)
