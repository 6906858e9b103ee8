"""
Veo 提供商单元测试
SDK操作对象到 GenerationOperation 的映射，以及对 SDK 的调用参数
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from google.genai import errors

from app.core.ai.config import ModelConfig
from app.core.ai.exceptions import GenerationError
from app.core.ai.models import GenerationOperation, OperationStatus
from app.core.ai.providers.gemini.veo import VeoVideoProvider, to_generation_operation
from app.core.media import EncodedMedia


def _sdk_operation(done, error=None, response=None, name="models/veo/operations/op-1"):
    return SimpleNamespace(name=name, done=done, error=error, response=response)


def _video_response(uri="https://files.example.com/v.mp4", filtered=None):
    video = SimpleNamespace(video=SimpleNamespace(uri=uri))
    return SimpleNamespace(generated_videos=[video], rai_media_filtered_reasons=filtered)


@pytest.mark.unit
class TestToGenerationOperation:
    """SDK操作映射测试类"""

    def test_not_done_is_running(self):
        """测试未完成映射为 RUNNING"""
        sdk_op = _sdk_operation(done=None)
        operation = to_generation_operation(sdk_op)

        assert operation.status is OperationStatus.RUNNING
        assert operation.handle is sdk_op
        assert operation.metadata["name"] == "models/veo/operations/op-1"

    def test_error_is_failed_with_message(self):
        """测试带错误的完成状态映射为 FAILED，原因取 message"""
        operation = to_generation_operation(
            _sdk_operation(done=True, error={"code": 8, "message": "Resource exhausted"})
        )

        assert operation.status is OperationStatus.FAILED
        assert operation.failure_reason == "Resource exhausted"
        assert operation.result_locator is None

    def test_success_takes_first_video_uri(self):
        """测试成功时取第一个视频的 uri"""
        operation = to_generation_operation(_sdk_operation(done=True, response=_video_response()))

        assert operation.status is OperationStatus.SUCCEEDED
        assert operation.result_locator == "https://files.example.com/v.mp4"

    def test_success_without_videos_has_no_locator(self):
        """测试被过滤导致没有视频时仍为 SUCCEEDED 但没有结果地址"""
        response = SimpleNamespace(generated_videos=[], rai_media_filtered_reasons=["unsafe content"])
        operation = to_generation_operation(_sdk_operation(done=True, response=response))

        assert operation.status is OperationStatus.SUCCEEDED
        assert operation.result_locator is None
        assert operation.metadata["filtered_reasons"] == ["unsafe content"]

    def test_dict_payload(self):
        """测试字典形式的操作对象"""
        operation = to_generation_operation({
            "name": "op-2",
            "done": True,
            "response": {"generated_videos": [{"video": {"uri": "https://x/y.mp4"}}]},
        })

        assert operation.result_locator == "https://x/y.mp4"


@pytest.mark.unit
class TestVeoVideoProvider:
    """VeoVideoProvider 测试类"""

    def setup_method(self):
        self.config = ModelConfig(
            model_id="default",
            model_name="veo-2.0-generate-001",
            api_key="test-key",
            capabilities=["video_gen"],
            provider_mapping={"video_gen": "gemini_veo"}
        )
        self.image = EncodedMedia(data=b"\x89PNG", mime_type="image/png", width=4, height=4)

    @pytest.mark.asyncio
    async def test_start_generation_calls_sdk(self):
        """测试提交时传入模型、提示词、图片与生成数量"""
        with patch("app.core.ai.providers.gemini.veo.genai.Client") as client_cls:
            sdk_client = MagicMock()
            sdk_client.models.generate_videos.return_value = _sdk_operation(done=False)
            client_cls.return_value = sdk_client

            provider = VeoVideoProvider(self.config)
            operation = await provider.start_generation(self.image, "spin it")

        kwargs = sdk_client.models.generate_videos.call_args.kwargs
        assert kwargs["model"] == "veo-2.0-generate-001"
        assert kwargs["prompt"] == "spin it"
        assert kwargs["image"].image_bytes == b"\x89PNG"
        assert kwargs["image"].mime_type == "image/png"
        assert kwargs["config"].number_of_videos == 1
        assert operation.status is OperationStatus.RUNNING
        client_cls.assert_called_once_with(api_key="test-key", http_options=None)

    @pytest.mark.asyncio
    async def test_get_operation_refreshes_by_handle(self):
        """测试按句柄重新查询"""
        with patch("app.core.ai.providers.gemini.veo.genai.Client") as client_cls:
            sdk_client = MagicMock()
            sdk_client.operations.get.return_value = _sdk_operation(
                done=True, response=_video_response()
            )
            client_cls.return_value = sdk_client

            provider = VeoVideoProvider(self.config)
            handle = _sdk_operation(done=False)
            refreshed = await provider.get_operation(GenerationOperation(handle=handle))

        sdk_client.operations.get.assert_called_once_with(handle)
        assert refreshed.status is OperationStatus.SUCCEEDED

    def test_capabilities_and_name(self):
        """测试能力与名称"""
        with patch("app.core.ai.providers.gemini.veo.genai.Client"):
            provider = VeoVideoProvider(self.config)

        assert provider.get_provider_name() == "gemini_veo"
        assert provider.get_api_key() == "test-key"

    @pytest.mark.asyncio
    async def test_start_generation_api_error_keeps_reason(self):
        """测试提交时的API错误（如配额耗尽）转换为 GenerationError 并保留原因"""
        quota_error = errors.ClientError(429, {
            "error": {"code": 429, "message": "quota exceeded", "status": "RESOURCE_EXHAUSTED"}
        })
        with patch("app.core.ai.providers.gemini.veo.genai.Client") as client_cls:
            sdk_client = MagicMock()
            sdk_client.models.generate_videos.side_effect = quota_error
            client_cls.return_value = sdk_client

            provider = VeoVideoProvider(self.config)
            with pytest.raises(GenerationError) as exc_info:
                await provider.start_generation(self.image, "spin it")

        assert exc_info.value.reason == "quota exceeded"
        assert exc_info.value.details["status_code"] == 429
        assert exc_info.value.__cause__ is quota_error

    @pytest.mark.asyncio
    async def test_get_operation_api_error_keeps_reason(self):
        """测试轮询时的API错误同样保留原因"""
        with patch("app.core.ai.providers.gemini.veo.genai.Client") as client_cls:
            sdk_client = MagicMock()
            sdk_client.operations.get.side_effect = errors.ServerError(503, {
                "error": {"code": 503, "message": "backend unavailable", "status": "UNAVAILABLE"}
            })
            client_cls.return_value = sdk_client

            provider = VeoVideoProvider(self.config)
            with pytest.raises(GenerationError, match="backend unavailable"):
                await provider.get_operation(GenerationOperation(handle=_sdk_operation(done=False)))
