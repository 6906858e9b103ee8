"""
AI模型交互统一模块
提供统一的AI Provider接口、视频生成轮询客户端与结果下载器
"""

from .base import BaseAIProvider
from .config import ModelConfig
from .models import (
    ModelCapability,
    OperationStatus,
    GenerationRequest,
    GenerationOperation,
    GeneratedArtifact,
)
from .exceptions import (
    VideoGenerationError,
    DecodeError,
    GenerationError,
    GenerationTimeoutError,
    GenerationCancelledError,
    FetchError,
)
from .factory import AIProviderFactory
from .registry import register_all_providers

__all__ = [
    "BaseAIProvider",
    "ModelConfig",
    "ModelCapability",
    "OperationStatus",
    "GenerationRequest",
    "GenerationOperation",
    "GeneratedArtifact",
    "VideoGenerationError",
    "DecodeError",
    "GenerationError",
    "GenerationTimeoutError",
    "GenerationCancelledError",
    "FetchError",
    "AIProviderFactory",
    "register_all_providers",
]
