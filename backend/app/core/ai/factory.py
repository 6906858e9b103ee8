"""
AI Provider工厂
"""

from typing import Any, Dict, List, Type

from app.core.log_utils import get_logger
from .base import BaseAIProvider
from .models import ModelCapability
from .config import ModelConfig

logger = get_logger(__name__)


class AIProviderFactory:
    """AI Provider工厂类"""

    # Provider注册表: {capability: {provider_name: ProviderClass}}
    _providers: Dict[ModelCapability, Dict[str, Type[BaseAIProvider]]] = {}

    @classmethod
    def register(
        cls,
        capability: ModelCapability,
        provider_name: str,
        provider_class: Type[BaseAIProvider]
    ):
        """
        注册Provider

        Args:
            capability: 能力枚举
            provider_name: Provider名称
            provider_class: Provider类
        """
        cls._providers.setdefault(capability, {})[provider_name] = provider_class
        logger.info(
            f"注册Provider: {capability.value}/{provider_name}",
            operation="register_provider",
            capability=capability.value,
            provider_name=provider_name
        )

    @classmethod
    def _get_provider_class(
        cls,
        capability: ModelCapability,
        provider_name: str
    ) -> Type[BaseAIProvider]:
        if capability not in cls._providers:
            raise ValueError(f"不支持的能力: {capability.value}")

        if provider_name not in cls._providers[capability]:
            available = list(cls._providers[capability].keys())
            raise ValueError(
                f"未注册的Provider: {capability.value}/{provider_name}, "
                f"可用的Provider: {available}"
            )
        return cls._providers[capability][provider_name]

    @classmethod
    def create(
        cls,
        model_config: ModelConfig,
        capability: ModelCapability
    ) -> BaseAIProvider:
        """
        根据模型配置中的 provider_mapping 创建Provider实例

        Raises:
            ValueError: 如果能力不支持或Provider未注册
        """
        provider_name = model_config.get_provider_for_capability(capability)
        if not provider_name:
            raise ValueError(
                f"模型 {model_config.model_id} 未配置 {capability.value} 的Provider"
            )
        return cls.create_provider(capability, provider_name, model_config)

    @classmethod
    def create_provider(
        cls,
        capability: ModelCapability,
        provider_name: str,
        model_config: Any
    ) -> BaseAIProvider:
        """
        创建Provider实例（简化接口，用于服务层调用）

        接受 ModelConfig、字典或 ORM 对象，内部统一转换为 ModelConfig
        """
        provider_class = cls._get_provider_class(capability, provider_name)

        if isinstance(model_config, ModelConfig):
            config = model_config
        elif isinstance(model_config, dict):
            config = ModelConfig.from_dict(model_config)
        else:
            config = ModelConfig(
                model_id=getattr(model_config, 'id', 'unknown'),
                model_name=getattr(model_config, 'ai_model_name', 'unknown'),
                api_key=getattr(model_config, 'api_key', ''),
                base_url=getattr(model_config, 'base_url', None),
                capabilities=getattr(model_config, 'capabilities', None) or [capability.value],
                provider_mapping=getattr(model_config, 'provider_mapping', None)
                or {capability.value: provider_name},
                parameters=getattr(model_config, 'parameters', None) or {}
            )

        logger.info(
            f"创建Provider实例: {capability.value}/{provider_name}",
            operation="create_provider",
            capability=capability.value,
            provider_name=provider_name,
            model_id=config.model_id
        )
        return provider_class(config)

    @classmethod
    def get_available_providers(cls, capability: ModelCapability) -> List[str]:
        """获取某种能力的所有可用Provider"""
        return list(cls._providers.get(capability, {}).keys())

    @classmethod
    def is_registered(cls, capability: ModelCapability, provider_name: str) -> bool:
        """检查Provider是否已注册"""
        return provider_name in cls._providers.get(capability, {})
