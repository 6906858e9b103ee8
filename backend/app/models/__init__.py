"""
数据模型包
导入全部模型，保证建表与关联解析时所有表都已注册到 Base.metadata
"""

from app.models.user import User, UserRole
from app.models.video import Video
from app.models.ai_model import AIModel
from app.models.site_setting import SiteSetting
from app.models.password_reset_token import PasswordResetToken
from app.models.video_generation_task import VideoGenerationTask, TaskStatus

__all__ = [
    "User",
    "UserRole",
    "Video",
    "AIModel",
    "SiteSetting",
    "PasswordResetToken",
    "VideoGenerationTask",
    "TaskStatus",
]
