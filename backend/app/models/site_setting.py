"""
站点设置数据模型
对应数据库表：site_settings（键值存储，值为JSONB）
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import JSONB

from app.db.database import Base
from app.utils.datetime_utils import utc_now


class SiteSetting(Base):
    """站点设置"""

    __tablename__ = "site_settings"

    key = Column(String(100), primary_key=True, comment="设置键，如 site_access / maintenance")
    value = Column(JSONB, nullable=False, default=dict)
    updated_by = Column(String(50), nullable=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<SiteSetting(key={self.key})>"
