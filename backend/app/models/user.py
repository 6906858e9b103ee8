"""
用户数据模型
对应数据库表：users
"""

import enum

from sqlalchemy import Column, String, Text, Boolean, DateTime

from app.db.database import Base
from app.utils.datetime_utils import utc_now


class UserRole(str, enum.Enum):
    """用户角色"""
    USER = "user"
    SUPER_ADMIN = "super_admin"


class User(Base):
    """用户模型"""

    __tablename__ = "users"

    id = Column(String(50), primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True, comment="登录邮箱")
    password_hash = Column(String(255), nullable=False, comment="bcrypt密码哈希")
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER.value, comment="user | super_admin")

    # Google Drive（访问令牌由前端授权后提交）
    drive_enabled = Column(Boolean, nullable=False, default=False, comment="是否同步视频到Google Drive")
    drive_access_token = Column(Text, nullable=True, comment="Google Drive OAuth访问令牌")

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    last_login = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN.value

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
