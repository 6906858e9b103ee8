"""
Google Drive 存储适配器

使用用户已授权的 OAuth 访问令牌调用 Drive v3 REST 接口。
视频上传到每个用户独立的文件夹，并开放"知道链接的人可查看"权限。
"""

import json
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.log_utils import get_logger
from app.core.storage.base_storage import BaseStorage
from app.core.storage.exceptions import (
    ConfigurationError,
    DeleteError,
    DownloadError,
    HTTPError,
    NetworkError,
    UploadError,
)
from app.core.storage.models import DownloadResult, UploadResult

logger = get_logger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
MULTIPART_BOUNDARY = "pixshop-drive-upload-boundary"


class GoogleDriveStorage(BaseStorage):
    """
    Google Drive 存储适配器，key 为 Drive 文件ID

    Args:
        access_token: OAuth 访问令牌（drive.file 范围）
        folder_name: 上传目标文件夹名称，不存在时自动创建
        transport: 自定义httpx传输层
    """

    ADAPTER_NAME = "google_drive"

    def __init__(
        self,
        access_token: str,
        folder_name: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if not access_token:
            raise ConfigurationError("缺少 Google Drive 访问令牌")
        self.access_token = access_token
        self.folder_name = folder_name
        self.api_url = settings.drive_api_url.rstrip("/")
        self.upload_url = settings.drive_upload_url
        self._transport = transport

    @classmethod
    def for_user(cls, user_id: str, access_token: str, **kwargs: Any) -> "GoogleDriveStorage":
        """按用户ID构建适配器（文件夹名 Pixshop_Videos_User_{user_id}）"""
        folder_name = settings.drive_folder_template.format(user_id=user_id)
        return cls(access_token=access_token, folder_name=folder_name, **kwargs)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"Authorization": f"Bearer {self.access_token}"},
            timeout=settings.drive_timeout,
            transport=self._transport
        )

    @staticmethod
    def _check(response: httpx.Response, action: str) -> httpx.Response:
        if response.is_success:
            return response
        logger.error(
            "Google Drive 请求失败",
            drive_action=action,
            status_code=response.status_code
        )
        raise HTTPError(
            f"Google Drive {action} 失败 (HTTP {response.status_code})",
            status_code=response.status_code
        )

    async def _get_or_create_folder(self, client: httpx.AsyncClient) -> str:
        query = (
            f"name='{self.folder_name}' and mimeType='{FOLDER_MIME_TYPE}' and trashed=false"
        )
        response = self._check(
            await client.get(
                f"{self.api_url}/files",
                params={"q": query, "fields": "files(id,name)"}
            ),
            "查询文件夹"
        )
        files = response.json().get("files") or []
        if files:
            return files[0]["id"]

        response = self._check(
            await client.post(
                f"{self.api_url}/files",
                params={"fields": "id"},
                json={"name": self.folder_name, "mimeType": FOLDER_MIME_TYPE}
            ),
            "创建文件夹"
        )
        folder_id = response.json()["id"]
        logger.info("已创建 Google Drive 文件夹", folder_name=self.folder_name)
        return folder_id

    @staticmethod
    def _multipart_body(metadata: Dict[str, Any], data: bytes, mime_type: str) -> bytes:
        delimiter = f"--{MULTIPART_BOUNDARY}\r\n".encode()
        return b"".join([
            delimiter,
            b"Content-Type: application/json; charset=UTF-8\r\n\r\n",
            json.dumps(metadata).encode("utf-8"),
            b"\r\n",
            delimiter,
            f"Content-Type: {mime_type}\r\n\r\n".encode(),
            data,
            f"\r\n--{MULTIPART_BOUNDARY}--".encode(),
        ])

    async def upload(
        self,
        data: bytes,
        key: str,
        mime_type: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> UploadResult:
        """上传文件，key 作为 Drive 中的文件名"""
        try:
            async with self._client() as client:
                file_metadata: Dict[str, Any] = {"name": key}
                if metadata and metadata.get("description"):
                    file_metadata["description"] = metadata["description"]
                if self.folder_name:
                    file_metadata["parents"] = [await self._get_or_create_folder(client)]

                response = self._check(
                    await client.post(
                        self.upload_url,
                        params={
                            "uploadType": "multipart",
                            "fields": "id,name,webViewLink,webContentLink,size"
                        },
                        content=self._multipart_body(file_metadata, data, mime_type),
                        headers={
                            "Content-Type": f"multipart/related; boundary={MULTIPART_BOUNDARY}"
                        }
                    ),
                    "上传文件"
                )
                file_info = response.json()

                self._check(
                    await client.post(
                        f"{self.api_url}/files/{file_info['id']}/permissions",
                        json={"role": "reader", "type": "anyone"}
                    ),
                    "设置共享权限"
                )
        except httpx.RequestError as e:
            logger.error("Google Drive 网络错误", drive_action="upload", exception=e)
            raise NetworkError(f"Google Drive 上传失败 (网络错误): {e}") from e
        except HTTPError as e:
            raise UploadError(e.message, details={"status_code": e.status_code}) from e

        logger.info("Google Drive 上传成功", drive_file_id=file_info["id"], size_bytes=len(data))
        return UploadResult(
            key=file_info["id"],
            url=file_info.get("webViewLink", ""),
            size=len(data),
            mime_type=mime_type,
            download_url=file_info.get("webContentLink")
        )

    async def download(self, key: str) -> DownloadResult:
        try:
            async with self._client() as client:
                response = self._check(
                    await client.get(
                        f"{self.api_url}/files/{key}",
                        params={"alt": "media"},
                        follow_redirects=True
                    ),
                    "下载文件"
                )
        except httpx.RequestError as e:
            raise NetworkError(f"Google Drive 下载失败 (网络错误): {e}") from e
        except HTTPError as e:
            raise DownloadError(e.message, details={"status_code": e.status_code}) from e

        mime_type = response.headers.get("content-type", "application/octet-stream").split(";")[0]
        return DownloadResult(data=response.content, size=len(response.content), mime_type=mime_type)

    async def delete(self, key: str) -> bool:
        try:
            async with self._client() as client:
                response = await client.delete(f"{self.api_url}/files/{key}")
        except httpx.RequestError as e:
            raise NetworkError(f"Google Drive 删除失败 (网络错误): {e}") from e

        if response.status_code == 404:
            return False
        try:
            self._check(response, "删除文件")
        except HTTPError as e:
            raise DeleteError(e.message, details={"status_code": e.status_code}) from e
        logger.info("Google Drive 文件已删除", drive_file_id=key)
        return True

    async def exists(self, key: str) -> bool:
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.api_url}/files/{key}",
                    params={"fields": "id,trashed"}
                )
        except httpx.RequestError as e:
            raise NetworkError(f"Google Drive 查询失败 (网络错误): {e}") from e

        if response.status_code == 404:
            return False
        self._check(response, "查询文件")
        return not response.json().get("trashed", False)
