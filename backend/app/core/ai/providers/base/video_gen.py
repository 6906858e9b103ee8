"""
图生视频能力Provider基类
"""

from abc import abstractmethod
from typing import Set

from app.core.ai.base import BaseAIProvider
from app.core.ai.models import ModelCapability, GenerationOperation
from app.core.media import EncodedMedia


class BaseVideoGenProvider(BaseAIProvider):
    """
    图生视频Provider基类

    远程生成是长任务：start_generation 只负责提交并返回运行中的操作，
    状态推进由调用方通过 get_operation 反复查询完成。
    """

    def get_capabilities(self) -> Set[ModelCapability]:
        """获取支持的能力"""
        return {ModelCapability.VIDEO_GEN}

    @abstractmethod
    async def start_generation(
        self,
        image: EncodedMedia,
        prompt: str,
        number_of_videos: int = 1
    ) -> GenerationOperation:
        """
        提交生成请求

        Args:
            image: 编码后的参考图片
            prompt: 生成指令
            number_of_videos: 生成数量，固定为1

        Returns:
            GenerationOperation: 处于运行中状态、携带远程句柄的操作
        """

    @abstractmethod
    async def get_operation(self, operation: GenerationOperation) -> GenerationOperation:
        """
        按句柄重新查询远程操作状态

        Returns:
            GenerationOperation: 新的操作记录，调用方用它替换本地记录
        """

    def get_api_key(self) -> str:
        """结果下载同样使用该密钥鉴权"""
        return self.model_config.api_key
