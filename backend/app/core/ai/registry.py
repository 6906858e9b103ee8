"""
AI Provider注册中心
管理所有Provider的注册
"""

from app.core.log_utils import get_logger
from .factory import AIProviderFactory
from .models import ModelCapability

logger = get_logger(__name__)


def register_all_providers():
    """注册所有Provider（按提供商组织），API进程和Celery worker启动时各调用一次"""

    logger.info("开始注册所有AI Provider")

    # ===== Gemini Veo =====
    from .providers.gemini.veo import VeoVideoProvider

    AIProviderFactory.register(ModelCapability.VIDEO_GEN, "gemini_veo", VeoVideoProvider)
    logger.info("Gemini Veo Provider注册完成")

    logger.info(
        "所有AI Provider注册完成",
        operation="register_all_providers_complete",
        total_capabilities=len(AIProviderFactory._providers)
    )
