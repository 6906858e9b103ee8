"""
视频模型管理单元测试
模型配置解析优先级、API密钥脱敏以及处理器的状态码映射
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException

from app.core.config import settings
from app.services.ai_model.management_service import ManagementService, mask_api_key
from app.services.video.generation_handler import VideoGenerationHandler
from tests.utils import MockBuilder


def _model(**fields):
    model = MagicMock()
    model.id = fields.get("id", "model_1")
    model.name = fields.get("name", "Veo 2")
    model.ai_model_name = fields.get("ai_model_name", "veo-2.0-generate-001")
    model.api_key = fields.get("api_key", "db-key")
    model.base_url = None
    model.capabilities = fields.get("capabilities", ["video_gen"])
    model.provider_mapping = {"video_gen": "gemini_veo"}
    model.parameters = {}
    model.is_enabled = fields.get("is_enabled", True)
    model.has_capability = lambda capability: capability in model.capabilities
    return model


@pytest.mark.unit
class TestVideoModelResolution:
    """模型配置解析测试类"""

    def setup_method(self):
        self.service = ManagementService(MockBuilder.create_mock_db_session())
        self.service.repository = AsyncMock()

    @pytest.mark.asyncio
    async def test_explicit_model(self):
        """测试显式指定的模型优先"""
        self.service.repository.get_by_id.return_value = _model(api_key="explicit")

        config = await self.service.get_video_model_config("model_1")

        assert config.model_id == "model_1"
        assert config.api_key == "explicit"
        self.service.repository.get_default_model.assert_not_called()

    @pytest.mark.asyncio
    async def test_disabled_explicit_model_rejected(self):
        """测试未启用的模型不可用"""
        self.service.repository.get_by_id.return_value = _model(is_enabled=False)

        with pytest.raises(ValueError):
            await self.service.get_video_model_config("model_1")

    @pytest.mark.asyncio
    async def test_explicit_model_without_video_capability(self):
        """测试不支持视频生成的模型不可用"""
        self.service.repository.get_by_id.return_value = _model(capabilities=["image_gen"])

        with pytest.raises(ValueError, match="不支持视频生成"):
            await self.service.get_video_model_config("model_1")

    @pytest.mark.asyncio
    async def test_default_model(self):
        """测试使用默认的启用模型"""
        self.service.repository.get_default_model.return_value = _model(id="model_default")

        config = await self.service.get_video_model_config()

        assert config.model_id == "model_default"
        assert config.provider_mapping == {"video_gen": "gemini_veo"}

    @pytest.mark.asyncio
    async def test_falls_back_to_settings(self, monkeypatch):
        """测试数据库中没有模型时使用全局配置"""
        monkeypatch.setattr(settings, "gemini_api_key", "env-key")
        self.service.repository.get_default_model.return_value = None

        config = await self.service.get_video_model_config()

        assert config.model_id == "default"
        assert config.api_key == "env-key"
        assert config.model_name == settings.video_default_model

    @pytest.mark.asyncio
    async def test_no_configuration(self, monkeypatch):
        """测试没有任何可用配置"""
        monkeypatch.setattr(settings, "gemini_api_key", "")
        self.service.repository.get_default_model.return_value = None

        with pytest.raises(ValueError):
            await self.service.get_video_model_config()

    def test_mask_api_key(self):
        """测试API密钥脱敏"""
        assert mask_api_key("AIzaSyExample1234") == "********1234"
        assert mask_api_key("abc") == "***"
        assert mask_api_key(None) == ""


@pytest.mark.unit
class TestVideoGenerationHandler:
    """视频生成处理器状态码测试类"""

    def setup_method(self):
        self.service = AsyncMock()
        self.handler = VideoGenerationHandler(MockBuilder.create_mock_db_session(), service=self.service)
        self.user = MockBuilder.create_mock_user()

    @pytest.mark.asyncio
    async def test_validation_error_is_400(self):
        """测试输入校验失败返回400"""
        self.service.create_task.side_effect = ValueError("Please upload at least one image")

        with pytest.raises(HTTPException) as exc_info:
            await self.handler.handle_create_task(self.user, [], "", None, None)

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_cancel_finished_task_is_409(self):
        """测试取消已结束的任务返回409"""
        self.service.cancel_task.side_effect = ValueError("Task is already completed")

        with pytest.raises(HTTPException) as exc_info:
            await self.handler.handle_cancel_task("task_1", self.user)

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_unknown_task_is_404(self):
        """测试任务不存在返回404"""
        self.service.get_task.return_value = None

        with pytest.raises(HTTPException) as exc_info:
            await self.handler.handle_get_task("task_x", self.user)

        assert exc_info.value.status_code == 404
