"""
视频生成轮询客户端

驱动一次远程生成任务直到终态：
    Submitting -> Polling -> Succeeded | Failed
另外支持两个可选出口：超过轮询上限（TimedOut）与调用方取消（Cancelled）。

每次 generate 调用各自持有操作记录与轮询计数，客户端本身不保存调用级状态，
同一个客户端可以被并发调用。
"""

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional, Tuple, Union

from app.core.ai.exceptions import (
    GenerationCancelledError,
    GenerationError,
    GenerationTimeoutError,
)
from app.core.ai.models import (
    GeneratedArtifact,
    GenerationOperation,
    GenerationRequest,
    OperationStatus,
)
from app.core.ai.providers.base.video_gen import BaseVideoGenProvider
from app.core.ai.result_fetcher import ResultFetcher
from app.core.log_messages import log_messages
from app.core.log_utils import get_logger
from app.core.media import MediaEncoder

logger = get_logger(__name__)

# 回调参数：进度文案、截至目前的状态查询次数（提交前为0）
ProgressCallback = Callable[[str, int], Union[None, Awaitable[None]]]


class ProgressMessages:
    """展示给用户的进度文案"""
    PREPARING = "Preparing images for the AI..."
    SUBMITTING = "Sending request to the video model..."
    STARTED = "Video generation started. This may take a few minutes..."
    STILL_GENERATING = "Still generating your video..."
    DOWNLOADING = "Generation complete! Downloading video..."

    DEFAULT_MILESTONES = {
        3: "The AI is composing the scene and setting up the camera path...",
        6: "Rendering frames. This is the longest step, thank you for your patience.",
    }


@dataclass(frozen=True)
class PollingPolicy:
    """
    轮询策略

    Attributes:
        interval: 两次状态查询之间的等待秒数
        max_polls: 最多查询次数，None 表示不限制
        max_wait_seconds: 从提交成功开始计算的最长等待时间，None 表示不限制
        milestones: {第N次查询: 文案}，其余查询使用 generic_message
        generic_message: 非里程碑查询的进度文案
    """
    interval: float = 10.0
    max_polls: Optional[int] = None
    max_wait_seconds: Optional[float] = None
    milestones: Dict[int, str] = field(
        default_factory=lambda: dict(ProgressMessages.DEFAULT_MILESTONES)
    )
    generic_message: str = ProgressMessages.STILL_GENERATING

    def message_for(self, poll_count: int) -> str:
        return self.milestones.get(poll_count) or self.generic_message

    def is_exceeded(self, poll_count: int, elapsed_seconds: float) -> bool:
        if self.max_polls is not None and poll_count >= self.max_polls:
            return True
        if self.max_wait_seconds is not None and elapsed_seconds >= self.max_wait_seconds:
            return True
        return False

    @classmethod
    def from_settings(cls, settings) -> "PollingPolicy":
        """从全局配置构建轮询策略"""
        return cls(
            interval=settings.video_poll_interval,
            max_polls=settings.video_max_polls,
            max_wait_seconds=settings.video_max_wait_seconds,
            milestones={
                int(count): message
                for count, message in (settings.video_progress_milestones or {}).items()
            }
        )


class GenerationClient:
    """
    视频生成客户端

    Args:
        provider: 图生视频Provider（负责提交与查询远程操作）
        fetcher: 结果下载器，成功时恰好调用一次
        encoder: 图片编码器
        policy: 轮询策略
        max_source_images: 传给编码器的张数上限
    """

    def __init__(
        self,
        provider: BaseVideoGenProvider,
        fetcher: ResultFetcher,
        encoder: Optional[MediaEncoder] = None,
        policy: Optional[PollingPolicy] = None,
        max_source_images: int = 4
    ):
        self.provider = provider
        self.fetcher = fetcher
        self.encoder = encoder or MediaEncoder()
        self.policy = policy or PollingPolicy()
        self.max_source_images = max_source_images

    async def generate(
        self,
        request: GenerationRequest,
        on_progress: ProgressCallback,
        cancel_event: Optional[asyncio.Event] = None
    ) -> GeneratedArtifact:
        """
        执行一次完整的生成：编码、提交、轮询、下载

        Args:
            request: 生成请求
            on_progress: 进度回调 on_progress(message, poll_count)，可以是普通函数或协程函数
            cancel_event: 设置后停止轮询（远程任务不会被取消）

        Returns:
            GeneratedArtifact: 下载得到的视频

        Raises:
            DecodeError: 输入图片无法解码
            GenerationError: 远程服务报告失败
            GenerationTimeoutError: 超过轮询上限
            GenerationCancelledError: 调用方取消
            FetchError: 结果下载失败
        """
        await self._emit(on_progress, ProgressMessages.PREPARING, 0)
        encoded = self.encoder.encode(request.source_images, self.max_source_images)
        self._raise_if_cancelled(cancel_event, poll_count=0)

        # ========== Submitting ==========
        await self._emit(on_progress, ProgressMessages.SUBMITTING, 0)
        logger.info(
            log_messages.GENERATION_SUBMIT,
            operation="generation_submit",
            model_selector=request.model_selector,
            image_count=len(request.source_images),
            prompt_length=len(request.instruction_text)
        )
        operation = await self.provider.start_generation(
            encoded, request.instruction_text, number_of_videos=1
        )
        await self._emit(on_progress, ProgressMessages.STARTED, 0)

        # ========== Polling ==========
        operation, poll_count = await self._poll_until_done(operation, on_progress, cancel_event)

        # ========== Terminal ==========
        logger.info(
            log_messages.GENERATION_TERMINAL,
            operation="generation_terminal",
            status=operation.status.value,
            has_locator=bool(operation.result_locator)
        )

        if operation.status is OperationStatus.FAILED:
            raise GenerationError(operation.failure_reason or "unknown error")

        await self._emit(on_progress, ProgressMessages.DOWNLOADING, poll_count)
        return await self.fetcher.fetch(operation)

    async def _poll_until_done(
        self,
        operation: GenerationOperation,
        on_progress: ProgressCallback,
        cancel_event: Optional[asyncio.Event]
    ) -> Tuple[GenerationOperation, int]:
        poll_count = 0
        started_at = time.monotonic()

        while not operation.is_done:
            self._raise_if_cancelled(cancel_event, poll_count)
            await self._sleep(cancel_event, poll_count)

            # 远程返回的记录整体替换本地记录
            operation = await self.provider.get_operation(operation)
            poll_count += 1

            logger.info(
                log_messages.GENERATION_POLL,
                operation="generation_poll",
                poll_count=poll_count,
                status=operation.status.value
            )
            await self._emit(on_progress, self.policy.message_for(poll_count), poll_count)

            if operation.is_done:
                break

            elapsed = time.monotonic() - started_at
            if self.policy.is_exceeded(poll_count, elapsed):
                logger.warning(
                    "视频生成轮询超时",
                    operation="generation_timeout",
                    poll_count=poll_count,
                    elapsed_seconds=round(elapsed, 1)
                )
                raise GenerationTimeoutError(poll_count, elapsed)

        return operation, poll_count

    async def _sleep(self, cancel_event: Optional[asyncio.Event], poll_count: int) -> None:
        if cancel_event is None:
            await asyncio.sleep(self.policy.interval)
            return

        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=self.policy.interval)
        except asyncio.TimeoutError:
            return
        self._raise_if_cancelled(cancel_event, poll_count)

    @staticmethod
    def _raise_if_cancelled(cancel_event: Optional[asyncio.Event], poll_count: int) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.info(
                "视频生成轮询已取消",
                operation="generation_cancelled",
                poll_count=poll_count
            )
            raise GenerationCancelledError(poll_count)

    @staticmethod
    async def _emit(on_progress: ProgressCallback, message: str, poll_count: int) -> None:
        result = on_progress(message, poll_count)
        if inspect.isawaitable(result):
            await result
