"""
AI模型配置管理
"""

from typing import Optional, Dict, Any, List
from .models import ModelCapability


class ModelConfig:
    """AI模型配置类"""

    def __init__(
        self,
        model_id: str,
        model_name: str,
        api_key: str,
        base_url: Optional[str] = None,
        capabilities: Optional[List[str]] = None,
        provider_mapping: Optional[Dict[str, str]] = None,
        parameters: Optional[Dict[str, Any]] = None
    ):
        """
        初始化模型配置

        Args:
            model_id: 模型配置ID（数据库主键或 "default"）
            model_name: 远程模型名称（如 "veo-2.0-generate-001"）
            api_key: API密钥，结果下载时同样使用
            base_url: API基础URL
            capabilities: 支持的能力列表
            provider_mapping: Provider映射（如 {"video_gen": "gemini_veo"}）
            parameters: 其他参数
        """
        self.model_id = model_id
        self.model_name = model_name
        self.api_key = api_key
        self.base_url = base_url
        self.capabilities = capabilities or []
        self.provider_mapping = provider_mapping or {}
        self.parameters = parameters or {}

    def get_provider_for_capability(self, capability: ModelCapability) -> Optional[str]:
        """获取某个能力对应的Provider名称，未配置返回None"""
        return self.provider_mapping.get(capability.value)

    def supports_capability(self, capability: ModelCapability) -> bool:
        """检查是否支持某种能力"""
        return capability.value in self.capabilities

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ModelConfig':
        """从字典创建配置对象（字段名与 ai_models 表一致）"""
        return cls(
            model_id=data.get('id', ''),
            model_name=data.get('ai_model_name', ''),
            api_key=data.get('api_key', ''),
            base_url=data.get('base_url'),
            capabilities=data.get('capabilities', []),
            provider_mapping=data.get('provider_mapping', {}),
            parameters=data.get('parameters', {})
        )

    def __repr__(self) -> str:
        return f"<ModelConfig(model_id={self.model_id}, model_name={self.model_name})>"
