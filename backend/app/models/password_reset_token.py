"""
密码重置令牌数据模型
对应数据库表：password_reset_tokens
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey

from app.db.database import Base
from app.utils.datetime_utils import utc_now


class PasswordResetToken(Base):
    """密码重置令牌（一次性使用）"""

    __tablename__ = "password_reset_tokens"

    id = Column(String(50), primary_key=True)
    user_id = Column(
        String(50),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    token = Column(String(255), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
