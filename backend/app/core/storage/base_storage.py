"""
存储抽象基类
定义统一的存储接口，支持多种存储后端
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from app.core.storage.models import UploadResult, DownloadResult


class BaseStorage(ABC):
    """存储抽象基类"""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        key: str,
        mime_type: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> UploadResult:
        """
        上传文件

        Args:
            data: 文件数据
            key: 存储键
            mime_type: MIME类型
            metadata: 可选的元数据

        Returns:
            UploadResult: 上传结果

        Raises:
            StorageError: 上传失败时抛出
        """

    @abstractmethod
    async def download(self, key: str) -> DownloadResult:
        """
        下载文件

        Raises:
            StorageError: 下载失败时抛出
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        删除文件

        Returns:
            bool: 文件存在并被删除时返回True
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """检查文件是否存在"""


__all__ = ['BaseStorage']
