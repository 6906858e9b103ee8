"""
AI模型配置数据模型（统一架构）
支持多种AI能力和多Provider配置
"""

from typing import Optional
from sqlalchemy import Column, String, Text, Boolean, DateTime, ARRAY
from sqlalchemy.dialects.postgresql import JSONB

from app.db.database import Base
from app.utils.datetime_utils import utc_now


class AIModel(Base):
    """AI模型配置模型（统一架构）"""

    __tablename__ = "ai_models"

    id = Column(String(50), primary_key=True, index=True)
    name = Column(String(255), nullable=False, comment="模型显示名称")
    ai_model_name = Column(String(255), nullable=False, comment="远程模型名称，如 veo-2.0-generate-001")

    # API配置
    base_url = Column(String(512), nullable=True, comment="API基础URL")
    api_key = Column(Text, nullable=False, comment="API密钥")

    # 能力和Provider映射
    capabilities = Column(ARRAY(Text), nullable=False, default=list, comment="模型支持的能力列表")
    provider_mapping = Column(JSONB, nullable=False, default=dict, comment="能力到Provider的映射")
    parameters = Column(JSONB, nullable=True, default=dict, comment="模型参数配置")

    # 状态管理
    is_enabled = Column(Boolean, default=True, nullable=False, comment="是否启用")
    is_default = Column(Boolean, default=False, nullable=False, comment="是否为默认模型")

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<AIModel(id={self.id}, name={self.name}, capabilities={self.capabilities})>"

    def has_capability(self, capability: str) -> bool:
        """检查模型是否支持指定能力"""
        return capability in (self.capabilities or [])

    def get_provider_for_capability(self, capability: str) -> Optional[str]:
        """获取指定能力的Provider"""
        if not self.has_capability(capability):
            return None
        return self.provider_mapping.get(capability) if self.provider_mapping else None

    @property
    def is_video_generation_model(self) -> bool:
        """是否为视频生成模型"""
        return self.has_capability('video_gen')
