"""
生成结果下载器
远程操作成功后，按结果地址下载视频并完整缓存在内存中
"""

from typing import Optional

import httpx

from app.core.ai.exceptions import FetchError
from app.core.ai.models import GeneratedArtifact, GenerationOperation
from app.core.log_utils import get_logger

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class ResultFetcher:
    """
    结果下载器

    Args:
        api_key: 下载鉴权使用的API密钥
        auth_mode: "query" 以 key 查询参数携带密钥，"header" 使用 x-goog-api-key 请求头
        timeout: 下载超时（秒）
        transport: 自定义httpx传输层（测试中注入 MockTransport）
    """

    API_KEY_PARAM = "key"
    API_KEY_HEADER = "x-goog-api-key"

    def __init__(
        self,
        api_key: str,
        auth_mode: str = "query",
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if auth_mode not in ("query", "header"):
            raise ValueError(f"不支持的鉴权方式: {auth_mode}")
        self.api_key = api_key
        self.auth_mode = auth_mode
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, operation: GenerationOperation) -> GeneratedArtifact:
        """
        下载成功操作的生成结果

        Raises:
            FetchError: 缺少结果地址、网络错误、非2xx响应或响应体为空
        """
        locator = operation.result_locator
        if not locator:
            raise FetchError("missing result locator")

        params = {}
        headers = {}
        if self.api_key:
            if self.auth_mode == "header":
                headers[self.API_KEY_HEADER] = self.api_key
            else:
                params[self.API_KEY_PARAM] = self.api_key

        logger.info("开始下载生成结果", operation="fetch_result_start", auth_mode=self.auth_mode)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport
            ) as client:
                response = await client.get(locator, params=params, headers=headers)
        except httpx.RequestError as e:
            logger.error("生成结果下载网络错误", operation="fetch_result_network_error", exception=e)
            raise FetchError(f"Failed to download the generated video: {e}") from e

        if not response.is_success:
            logger.error(
                "生成结果下载HTTP错误",
                operation="fetch_result_http_error",
                status_code=response.status_code
            )
            raise FetchError(
                f"Failed to download the generated video. Status: {response.status_code}",
                status_code=response.status_code
            )

        data = response.content
        if not data:
            raise FetchError(
                "Failed to download the generated video: empty response body",
                status_code=response.status_code
            )

        content_type = response.headers.get("content-type", "")
        mime_type = content_type.split(";", 1)[0].strip().lower() or DEFAULT_MIME_TYPE

        logger.info(
            "生成结果下载成功",
            operation="fetch_result_success",
            size_bytes=len(data),
            mime_type=mime_type
        )
        return GeneratedArtifact(data=data, mime_type=mime_type)
