"""
Repository模块
包含所有数据访问层的Repository类
"""

from .base import BaseRepository
from .user import UserRepository
from .video import VideoRepository
from .ai_model import AIModelRepository
from .site_setting import SiteSettingRepository
from .password_reset_token import PasswordResetTokenRepository
from .video_generation_task import VideoGenerationTaskRepository

__all__ = [
    'BaseRepository',
    'UserRepository',
    'VideoRepository',
    'AIModelRepository',
    'SiteSettingRepository',
    'PasswordResetTokenRepository',
    'VideoGenerationTaskRepository',
]
