"""
存储服务模块
提供统一的存储服务访问接口，支持本地文件系统与 Google Drive
"""

from app.core.config import settings
from app.core.storage.base_storage import BaseStorage
from app.core.storage.adapters.local import LocalStorage
from app.core.storage.adapters.google_drive import GoogleDriveStorage
from app.core.storage.exceptions import *  # noqa: F401,F403
from app.core.storage.factory import (
    create_adapter,
    list_available_adapters,
    register_adapter,
)
from app.core.storage.models import UploadResult, DownloadResult

register_adapter(LocalStorage.ADAPTER_NAME, LocalStorage)
register_adapter(GoogleDriveStorage.ADAPTER_NAME, GoogleDriveStorage)


def get_upload_storage() -> BaseStorage:
    """源图片存储（workspace/uploads）"""
    return create_adapter(LocalStorage.ADAPTER_NAME, base_dir=settings.absolute_upload_dir)


def get_video_storage() -> BaseStorage:
    """生成视频存储（workspace/videos）"""
    return create_adapter(LocalStorage.ADAPTER_NAME, base_dir=settings.absolute_videos_dir)


def get_drive_storage(user_id: str, access_token: str) -> GoogleDriveStorage:
    """指定用户的 Google Drive 存储"""
    return GoogleDriveStorage.for_user(user_id=user_id, access_token=access_token)


__all__ = [
    # 工厂函数
    'get_upload_storage',
    'get_video_storage',
    'get_drive_storage',
    'create_adapter',
    'list_available_adapters',
    'register_adapter',
    # 抽象接口与数据模型
    'BaseStorage',
    'UploadResult',
    'DownloadResult',
    # 适配器类
    'LocalStorage',
    'GoogleDriveStorage',
]
