"""
存储服务数据模型
定义存储操作中使用的所有数据结构
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class UploadResult:
    """
    上传结果

    Attributes:
        key: 存储键（本地为相对路径，Google Drive 为文件ID）
        url: 访问URL
        size: 文件大小（字节）
        mime_type: MIME类型
        download_url: 直接下载URL（Google Drive 的 webContentLink）
        uploaded_at: 上传时间
    """
    key: str
    url: str
    size: int
    mime_type: str
    download_url: Optional[str] = None
    uploaded_at: Optional[datetime] = None


@dataclass(frozen=True)
class DownloadResult:
    """
    下载结果

    Attributes:
        data: 文件数据
        size: 文件大小（字节）
        mime_type: MIME类型
        last_modified: 最后修改时间
    """
    data: bytes
    size: int
    mime_type: str
    last_modified: Optional[datetime] = None


__all__ = [
    'UploadResult',
    'DownloadResult',
]
