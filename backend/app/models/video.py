"""
生成视频数据模型
对应数据库表：videos
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, Integer, ForeignKey

from app.db.database import Base
from app.utils.datetime_utils import utc_now


class Video(Base):
    """生成视频记录"""

    __tablename__ = "videos"

    id = Column(String(50), primary_key=True, index=True)
    user_id = Column(
        String(50),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    prompt = Column(Text, nullable=False, default="", comment="用户输入的提示词")
    animation_style = Column(String(50), nullable=True, comment="动画风格")

    # 本地存储
    storage_key = Column(String(512), nullable=False, comment="videos目录下的相对路径")
    mime_type = Column(String(100), nullable=False, default="video/mp4")
    file_size = Column(Integer, nullable=False, default=0)

    # Google Drive
    drive_file_id = Column(String(255), nullable=True)
    drive_view_link = Column(Text, nullable=True)
    drive_download_link = Column(Text, nullable=True)
    is_stored_in_drive = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, user_id={self.user_id}, size={self.file_size})>"
