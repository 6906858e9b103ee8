"""
AI模型管理服务（统一架构）
处理AI模型的CRUD操作，并为视频生成解析模型配置
"""

from typing import Optional, Dict, Any, List
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.ai.config import ModelConfig
from app.core.ai.models import ModelCapability
from app.core.config import settings
from app.core.log_utils import get_logger
from app.repositories.ai_model import AIModelRepository
from app.utils.datetime_utils import format_datetime_iso
from app.utils.id_utils import generate_model_id

logger = get_logger(__name__)

EDITABLE_FIELDS = (
    "name", "ai_model_name", "base_url", "api_key",
    "capabilities", "provider_mapping", "parameters",
    "is_enabled", "is_default",
)


def mask_api_key(api_key: Optional[str]) -> str:
    """只保留末4位"""
    if not api_key:
        return ""
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return "*" * 8 + api_key[-4:]


class ManagementService:
    """AI模型管理服务"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = AIModelRepository(db)

    async def get_model_for_edit(self, model_id: str) -> Optional[Dict[str, Any]]:
        """获取模型详情用于编辑（包含API密钥）"""
        model = await self.repository.get_by_id(model_id)
        if not model:
            return None
        return self._model_to_dict(model, include_secret=True)

    async def list_models(
        self,
        enabled_only: bool = True,
        capability: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """获取模型列表（API密钥脱敏）"""
        models = await self.repository.list_models(
            enabled_only=enabled_only,
            capability=capability
        )
        return [self._model_to_dict(model) for model in models]

    async def create_model(self, model_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        创建新模型

        Raises:
            ValueError: 同名模型已存在或缺少必填字段
        """
        if await self.repository.get_model_by_name(model_data["name"]):
            raise ValueError(f"已存在同名模型: {model_data['name']}")

        capabilities = model_data.get("capabilities") or [ModelCapability.VIDEO_GEN.value]
        provider_mapping = model_data.get("provider_mapping") or {
            ModelCapability.VIDEO_GEN.value: settings.video_default_provider
        }

        new_model = await self.repository.create(
            id=generate_model_id(),
            name=model_data["name"],
            ai_model_name=model_data["ai_model_name"],
            base_url=model_data.get("base_url"),
            api_key=model_data.get("api_key", ""),
            capabilities=capabilities,
            provider_mapping=provider_mapping,
            parameters=model_data.get("parameters") or {},
            is_enabled=model_data.get("is_enabled", True),
            is_default=model_data.get("is_default", False)
        )

        if new_model.is_default:
            for capability in capabilities:
                await self.repository.clear_default(capability, exclude_id=new_model.id)

        logger.info(
            "成功创建AI模型",
            model_id=new_model.id,
            model_display_name=new_model.name,
            capabilities=new_model.capabilities
        )
        return self._model_to_dict(new_model)

    async def update_model(self, model_id: str, update_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """更新模型，模型不存在时返回None"""
        update_fields = {
            field: update_data[field]
            for field in EDITABLE_FIELDS
            if field in update_data and update_data[field] is not None
        }

        updated_model = await self.repository.update(model_id, **update_fields)
        if not updated_model:
            return None

        if update_fields.get("is_default"):
            for capability in updated_model.capabilities or []:
                await self.repository.clear_default(capability, exclude_id=model_id)

        logger.info("成功更新AI模型", model_id=model_id, changed=sorted(update_fields.keys()))
        return self._model_to_dict(updated_model)

    async def delete_model(self, model_id: str) -> bool:
        """删除模型"""
        success = await self.repository.delete(model_id)
        if success:
            logger.info("成功删除AI模型", model_id=model_id)
        return success

    async def get_video_model_config(self, model_id: Optional[str] = None) -> ModelConfig:
        """
        解析视频生成使用的模型配置

        优先级：显式指定的模型 > 启用的默认 video_gen 模型 > 全局配置中的 Gemini 密钥与默认模型

        Raises:
            ValueError: 指定的模型不存在、未启用或不支持视频生成；或没有任何可用配置
        """
        capability = ModelCapability.VIDEO_GEN.value

        if model_id:
            model = await self.repository.get_by_id(model_id)
            if not model or not model.is_enabled:
                raise ValueError(f"模型不存在或未启用: {model_id}")
            if not model.has_capability(capability):
                raise ValueError(f"模型不支持视频生成: {model.name}")
        else:
            model = await self.repository.get_default_model(capability=capability)

        if model:
            return ModelConfig(
                model_id=model.id,
                model_name=model.ai_model_name,
                api_key=model.api_key,
                base_url=model.base_url,
                capabilities=list(model.capabilities or []),
                provider_mapping=dict(model.provider_mapping or {}),
                parameters=dict(model.parameters or {})
            )

        if not settings.gemini_api_key:
            raise ValueError("没有可用的视频生成模型，请配置 GEMINI_API_KEY 或在管理后台添加模型")

        return ModelConfig(
            model_id="default",
            model_name=settings.video_default_model,
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            capabilities=[capability],
            provider_mapping={capability: settings.video_default_provider}
        )

    def _model_to_dict(self, model, include_secret: bool = False) -> Dict[str, Any]:
        """将模型对象转换为字典"""
        return {
            "id": model.id,
            "name": model.name,
            "ai_model_name": model.ai_model_name,
            "base_url": model.base_url,
            "api_key": model.api_key if include_secret else mask_api_key(model.api_key),
            "capabilities": model.capabilities or [],
            "provider_mapping": model.provider_mapping or {},
            "parameters": model.parameters or {},
            "is_enabled": model.is_enabled,
            "is_default": model.is_default,
            "created_at": format_datetime_iso(model.created_at),
            "updated_at": format_datetime_iso(model.updated_at)
        }
