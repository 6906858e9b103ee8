"""
AI模型交互的数据模型
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple


class ModelCapability(str, Enum):
    """模型能力枚举"""
    VIDEO_GEN = "video_gen"


class OperationStatus(str, Enum):
    """远程长任务状态"""
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """SUCCEEDED / FAILED 为终态，不会再发生迁移"""
        return self is not OperationStatus.RUNNING


@dataclass(frozen=True)
class GenerationRequest:
    """
    一次生成请求（提交后不可变）

    Attributes:
        source_images: 按顺序排列的原始图片字节（1-4张）
        instruction_text: 生成指令
        model_selector: 调用方选择的模型标识（对客户端不透明）
    """
    source_images: Tuple[bytes, ...]
    instruction_text: str
    model_selector: str

    def __post_init__(self):
        # 允许传入list，统一为tuple保证不可变
        object.__setattr__(self, "source_images", tuple(self.source_images))


@dataclass(frozen=True)
class GenerationOperation:
    """
    远程生成任务的本地镜像

    只能通过重新向远程服务查询状态来替换，本地从不推断状态。
    """
    handle: Any
    status: OperationStatus = OperationStatus.RUNNING
    result_locator: Optional[str] = None
    failure_reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_done(self) -> bool:
        return self.status.is_terminal


@dataclass(frozen=True)
class GeneratedArtifact:
    """生成产物（视频或图片字节），所有权交给调用方"""
    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)

