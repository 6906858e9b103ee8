"""
视频生成异常定义
编码、远程生成、结果下载各阶段的错误类型，均不在内部重试
"""

from typing import Any, Dict, Optional


class VideoGenerationError(Exception):
    """
    视频生成基础异常

    Attributes:
        message: 错误消息
        code: 错误码
        details: 错误详情
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class DecodeError(VideoGenerationError):
    """输入图片无法解码"""

    def __init__(self, index: int, reason: str = "") -> None:
        message = f"Failed to decode input image #{index + 1}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code="DECODE_ERROR", details={"index": index})
        self.index = index


class GenerationError(VideoGenerationError):
    """远程服务报告生成失败，原因原样透传"""

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            f"Video generation failed: {reason}",
            code="GENERATION_FAILED",
            details=details
        )
        self.reason = reason


class GenerationTimeoutError(VideoGenerationError, TimeoutError):
    """轮询超过调用方配置的上限"""

    def __init__(self, polls: int, elapsed_seconds: float) -> None:
        super().__init__(
            f"Video generation timed out after {polls} polls ({elapsed_seconds:.0f}s)",
            code="GENERATION_TIMEOUT",
            details={"polls": polls, "elapsed_seconds": elapsed_seconds}
        )
        self.polls = polls
        self.elapsed_seconds = elapsed_seconds


class GenerationCancelledError(VideoGenerationError):
    """调用方取消了轮询（远程任务本身不会被取消）"""

    def __init__(self, polls: int = 0) -> None:
        super().__init__(
            "Video generation was cancelled",
            code="GENERATION_CANCELLED",
            details={"polls": polls}
        )
        self.polls = polls


class FetchError(VideoGenerationError):
    """生成产物下载失败"""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(
            message,
            code="FETCH_ERROR",
            details={"status_code": status_code} if status_code is not None else None
        )
        self.status_code = status_code


__all__ = [
    "VideoGenerationError",
    "DecodeError",
    "GenerationError",
    "GenerationTimeoutError",
    "GenerationCancelledError",
    "FetchError",
]
