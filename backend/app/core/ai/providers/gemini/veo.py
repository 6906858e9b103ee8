"""
Google Veo 图生视频提供商
基于 Google GenAI SDK 的长任务接口（generate_videos + operations.get）
"""

import asyncio
from functools import partial
from typing import Any, Optional

from google import genai
from google.genai import errors, types

from app.core.ai.exceptions import GenerationError
from app.core.ai.models import GenerationOperation, OperationStatus
from app.core.ai.providers.base.video_gen import BaseVideoGenProvider
from app.core.ai.tracker import MLflowTracingMixin
from app.core.log_utils import get_logger
from app.core.media import EncodedMedia

logger = get_logger(__name__)


def _read(obj: Any, key: str) -> Any:
    """SDK对象的字段既可能是属性也可能是字典键"""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _failure_reason(error: Any) -> str:
    message = _read(error, "message")
    return str(message) if message else str(error)


def _api_failure(error: errors.APIError, operation: str) -> GenerationError:
    """SDK请求本身失败（配额、参数错误等）时保留远程给出的原因"""
    reason = error.message or str(error)
    logger.warning(
        "Veo API请求失败",
        operation=operation,
        status_code=error.code,
        error=reason
    )
    return GenerationError(reason, details={"status_code": error.code, "status": error.status})


def _first_video_uri(response: Any) -> Optional[str]:
    videos = _read(response, "generated_videos") or []
    if not videos:
        return None
    return _read(_read(videos[0], "video"), "uri")


def to_generation_operation(sdk_operation: Any) -> GenerationOperation:
    """
    将SDK返回的操作对象映射为 GenerationOperation

    - done 为假：RUNNING
    - error 非空：FAILED，原样保留远程错误信息
    - 其余：SUCCEEDED，取第一个生成视频的 uri 作为结果地址（可能为空）
    """
    metadata = {"name": _read(sdk_operation, "name")}

    if not _read(sdk_operation, "done"):
        return GenerationOperation(handle=sdk_operation, metadata=metadata)

    error = _read(sdk_operation, "error")
    if error:
        return GenerationOperation(
            handle=sdk_operation,
            status=OperationStatus.FAILED,
            failure_reason=_failure_reason(error),
            metadata=metadata
        )

    response = _read(sdk_operation, "response")
    filtered_reasons = _read(response, "rai_media_filtered_reasons")
    if filtered_reasons:
        metadata["filtered_reasons"] = list(filtered_reasons)

    return GenerationOperation(
        handle=sdk_operation,
        status=OperationStatus.SUCCEEDED,
        result_locator=_first_video_uri(response),
        metadata=metadata
    )


class VeoVideoProvider(BaseVideoGenProvider, MLflowTracingMixin):
    """Google Veo 图生视频提供商"""

    def __init__(self, model_config):
        """
        初始化Veo提供商

        Args:
            model_config: AI模型配置对象
        """
        BaseVideoGenProvider.__init__(self, model_config)
        MLflowTracingMixin.__init__(self)

        api_base = getattr(model_config, 'base_url', None)
        http_options = {"base_url": api_base} if api_base else None

        self.client = genai.Client(
            api_key=model_config.api_key,
            http_options=http_options
        )
        self.model = model_config.model_name

        logger.info(
            "VeoVideoProvider初始化成功",
            operation="veo_init_success",
            model=self.model,
            has_api_base=bool(api_base)
        )

    def get_provider_name(self) -> str:
        """获取Provider名称"""
        return "gemini_veo"

    async def start_generation(
        self,
        image: EncodedMedia,
        prompt: str,
        number_of_videos: int = 1
    ) -> GenerationOperation:
        """提交图生视频请求"""

        async def _call():
            loop = asyncio.get_running_loop()
            try:
                sdk_operation = await loop.run_in_executor(
                    None,
                    partial(
                        self.client.models.generate_videos,
                        model=self.model,
                        prompt=prompt,
                        image=types.Image(image_bytes=image.data, mime_type=image.mime_type),
                        config=types.GenerateVideosConfig(number_of_videos=number_of_videos)
                    )
                )
            except errors.APIError as e:
                raise _api_failure(e, "veo_generate_start") from e
            return to_generation_operation(sdk_operation)

        logger.info(
            "调用Veo API提交视频生成",
            operation="veo_generate_start",
            model=self.model,
            prompt_length=len(prompt),
            image_width=image.width,
            image_height=image.height
        )

        return await self._with_mlflow_trace(
            operation_name="start_generation",
            inputs={
                "model": self.model,
                "prompt": prompt,
                "image_size": [image.width, image.height],
                "number_of_videos": number_of_videos
            },
            call_func=_call
        )

    async def get_operation(self, operation: GenerationOperation) -> GenerationOperation:
        """按句柄查询远程操作状态"""

        async def _call():
            loop = asyncio.get_running_loop()
            try:
                sdk_operation = await loop.run_in_executor(
                    None,
                    partial(self.client.operations.get, operation.handle)
                )
            except errors.APIError as e:
                raise _api_failure(e, "veo_get_operation") from e
            return to_generation_operation(sdk_operation)

        return await self._with_mlflow_trace(
            operation_name="get_operation",
            inputs={"operation_name": operation.metadata.get("name")},
            call_func=_call
        )
