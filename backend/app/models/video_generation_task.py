"""
视频生成任务模型
对应数据库表：video_generation_tasks
"""

import enum

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB

from app.db.database import Base
from app.utils.datetime_utils import utc_now


class TaskStatus(str, enum.Enum):
    """任务状态枚举"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @classmethod
    def finished(cls):
        return (cls.COMPLETED.value, cls.FAILED.value, cls.CANCELLED.value)


class VideoGenerationTask(Base):
    """视频生成任务"""

    __tablename__ = "video_generation_tasks"

    id = Column(String(50), primary_key=True)
    user_id = Column(
        String(50),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # 任务输入
    prompt = Column(Text, nullable=False, default="")
    animation_style = Column(String(50), nullable=True)
    model_id = Column(String(50), nullable=True)  # 为空时使用默认视频模型
    source_keys = Column(JSONB, nullable=False, default=list)  # uploads目录下的源图片

    # 任务状态
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value, index=True)
    progress_message = Column(Text, nullable=True)
    poll_count = Column(Integer, nullable=False, default=0)
    cancel_requested = Column(Boolean, nullable=False, default=False)
    error_message = Column(Text, nullable=True)

    # 结果
    video_id = Column(String(50), nullable=True)

    # Celery任务信息
    celery_task_id = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    @property
    def is_finished(self) -> bool:
        return self.status in TaskStatus.finished()
