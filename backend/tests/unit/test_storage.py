"""
存储适配器单元测试
本地文件系统适配器与 Google Drive 适配器（httpx.MockTransport）
"""

import json

import httpx
import pytest

from app.core.storage import GoogleDriveStorage, LocalStorage, create_adapter
from app.core.storage.exceptions import (
    ConfigurationError,
    DownloadError,
    InvalidKeyError,
    UploadError,
)


@pytest.mark.unit
class TestLocalStorage:
    """LocalStorage 测试类"""

    @pytest.mark.asyncio
    async def test_upload_download_delete(self, storage_dir):
        """测试写入、读取、删除"""
        storage = LocalStorage(storage_dir)

        result = await storage.upload(b"video-bytes", "user-1/video_1.mp4", "video/mp4")
        assert result.size == 11
        assert (storage_dir / "user-1" / "video_1.mp4").read_bytes() == b"video-bytes"
        assert await storage.exists("user-1/video_1.mp4")

        downloaded = await storage.download("user-1/video_1.mp4")
        assert downloaded.data == b"video-bytes"
        assert downloaded.mime_type == "video/mp4"

        assert await storage.delete("user-1/video_1.mp4") is True
        assert await storage.delete("user-1/video_1.mp4") is False
        assert not await storage.exists("user-1/video_1.mp4")

    @pytest.mark.asyncio
    async def test_download_missing(self, storage_dir):
        """测试读取不存在的文件"""
        with pytest.raises(DownloadError):
            await LocalStorage(storage_dir).download("nope.png")

    def test_rejects_path_traversal(self, storage_dir):
        """测试禁止访问存储目录之外的路径"""
        storage = LocalStorage(storage_dir)
        with pytest.raises(InvalidKeyError):
            storage.resolve_path("../outside.txt")
        with pytest.raises(InvalidKeyError):
            storage.resolve_path("")

    def test_factory_creates_local_adapter(self, storage_dir):
        """测试通过工厂创建适配器"""
        storage = create_adapter("local", base_dir=storage_dir)
        assert isinstance(storage, LocalStorage)

    def test_factory_unknown_adapter(self):
        """测试不存在的适配器"""
        with pytest.raises(ConfigurationError):
            create_adapter("tencent_cos")


class FakeDrive:
    """记录请求并模拟 Drive v3 接口"""

    def __init__(self, existing_folder_id=None, upload_status=200):
        self.existing_folder_id = existing_folder_id
        self.upload_status = upload_status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path.endswith("/drive/v3/files"):
            files = [{"id": self.existing_folder_id, "name": "folder"}] if self.existing_folder_id else []
            return httpx.Response(200, json={"files": files})
        if request.method == "POST" and path.startswith("/upload/"):
            if self.upload_status != 200:
                return httpx.Response(self.upload_status, json={"error": "denied"})
            return httpx.Response(200, json={
                "id": "file-1",
                "webViewLink": "https://drive.google.com/file/d/file-1/view",
                "webContentLink": "https://drive.google.com/uc?id=file-1",
            })
        if request.method == "POST" and path.endswith("/drive/v3/files"):
            return httpx.Response(200, json={"id": "folder-new"})
        if request.method == "POST" and path.endswith("/permissions"):
            return httpx.Response(200, json={"id": "anyoneWithLink"})
        if request.method == "DELETE":
            return httpx.Response(404 if path.endswith("/missing") else 204)
        return httpx.Response(500)


@pytest.mark.unit
class TestGoogleDriveStorage:
    """GoogleDriveStorage 测试类"""

    @pytest.mark.asyncio
    async def test_upload_creates_folder_and_shares(self):
        """测试首次上传：创建用户文件夹、上传、开放查看权限"""
        drive = FakeDrive()
        storage = GoogleDriveStorage.for_user(
            "user-1", "oauth-token", transport=httpx.MockTransport(drive)
        )

        result = await storage.upload(b"mp4", "pixshop-360.mp4", "video/mp4")

        assert result.key == "file-1"
        assert result.url == "https://drive.google.com/file/d/file-1/view"
        assert result.download_url == "https://drive.google.com/uc?id=file-1"

        methods = [(r.method, r.url.path) for r in drive.requests]
        assert methods[0] == ("GET", "/drive/v3/files")
        assert methods[1] == ("POST", "/drive/v3/files")
        assert methods[2][1] == "/upload/drive/v3/files"
        assert methods[3] == ("POST", "/drive/v3/files/file-1/permissions")

        folder_request = json.loads(drive.requests[1].content)
        assert folder_request["name"] == "Pixshop_Videos_User_user-1"
        assert b'"parents": ["folder-new"]' in drive.requests[2].content
        assert json.loads(drive.requests[3].content) == {"role": "reader", "type": "anyone"}
        assert all(r.headers["authorization"] == "Bearer oauth-token" for r in drive.requests)

    @pytest.mark.asyncio
    async def test_upload_reuses_existing_folder(self):
        """测试已有文件夹时不再创建"""
        drive = FakeDrive(existing_folder_id="folder-1")
        storage = GoogleDriveStorage.for_user("user-1", "t", transport=httpx.MockTransport(drive))

        await storage.upload(b"mp4", "v.mp4", "video/mp4")

        assert [r.method for r in drive.requests] == ["GET", "POST", "POST"]
        assert b'"parents": ["folder-1"]' in drive.requests[1].content

    @pytest.mark.asyncio
    async def test_upload_http_error(self):
        """测试上传被拒绝"""
        drive = FakeDrive(existing_folder_id="folder-1", upload_status=403)
        storage = GoogleDriveStorage.for_user("user-1", "t", transport=httpx.MockTransport(drive))

        with pytest.raises(UploadError) as exc_info:
            await storage.upload(b"mp4", "v.mp4", "video/mp4")

        assert exc_info.value.details["status_code"] == 403

    @pytest.mark.asyncio
    async def test_delete(self):
        """测试删除，404 视为不存在"""
        storage = GoogleDriveStorage("t", transport=httpx.MockTransport(FakeDrive()))

        assert await storage.delete("file-1") is True
        assert await storage.delete("missing") is False

    def test_requires_access_token(self):
        """测试缺少访问令牌"""
        with pytest.raises(ConfigurationError):
            GoogleDriveStorage("")
