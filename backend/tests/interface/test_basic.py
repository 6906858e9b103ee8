"""
基础接口集成测试
测试应用的基础功能，包括健康检查、根路径、认证拦截与视频接口
数据库会话与业务处理器通过依赖覆盖替换，不需要真实的PostgreSQL
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.api.deps import get_current_user, site_gate
from app.core.config import settings
from app.db.database import get_db
from main import app
from tests.utils import MockBuilder, make_image_bytes


async def _fake_db():
    yield MockBuilder.create_mock_db_session()


@pytest.mark.integration
@pytest.mark.basic
class TestBasicEndpoints:
    """基础端点集成测试类"""

    def setup_method(self):
        """测试前置设置"""
        self.client = TestClient(app)

    def test_root(self):
        """测试根路径"""
        response = self.client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Pixshop 360 Video API"
        assert "version" in data
        assert "docs" in data

    def test_health(self):
        """测试健康检查"""
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_videos_require_authentication(self):
        """测试视频接口需要登录"""
        app.dependency_overrides[get_db] = _fake_db
        try:
            response = self.client.get("/api/v1/videos")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_site_status_is_public(self):
        """测试站点状态无需登录"""
        status_data = {"site_access_enabled": True, "maintenance": {"enabled": False}}
        app.dependency_overrides[get_db] = _fake_db
        try:
            with patch("app.api.v1.endpoints.site.SiteSettingsHandler") as handler_cls:
                handler_cls.return_value.handle_get_status = AsyncMock(return_value=status_data)
                response = self.client.get("/api/v1/site/status")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        assert response.json()["data"] == status_data


@pytest.mark.integration
@pytest.mark.basic
class TestVideoEndpoints:
    """视频接口集成测试类（处理器被替换）"""

    def setup_method(self):
        self.user = MockBuilder.create_mock_user()
        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_current_user] = lambda: self.user
        app.dependency_overrides[site_gate] = lambda: self.user
        self.client = TestClient(app)

        self.patcher = patch("app.api.v1.endpoints.videos.VideoGenerationHandler")
        self.handler = MagicMock()
        self.patcher.start().return_value = self.handler

    def teardown_method(self):
        self.patcher.stop()
        app.dependency_overrides.clear()

    def test_create_generation(self):
        """测试上传图片创建任务"""
        self.handler.handle_create_task = AsyncMock(return_value={
            "task_id": "task_1",
            "status": "pending",
            "progress_message": "Waiting for an available worker...",
        })

        response = self.client.post(
            "/api/v1/videos/generations",
            files=[
                ("files", ("front.png", make_image_bytes(8, 8), "image/png")),
                ("files", ("side.png", make_image_bytes(8, 8), "image/png")),
            ],
            data={"prompt": "a red sneaker", "animation_style": "Orbit"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["data"]["task_id"] == "task_1"

        user, sources, prompt, style, model_id = self.handler.handle_create_task.call_args.args
        assert user is self.user
        assert [s.content_type for s in sources] == ["image/png", "image/png"]
        assert sources[0].filename == "front.png"
        assert (prompt, style, model_id) == ("a red sneaker", "Orbit", None)

    def test_create_generation_reads_at_most_limit_plus_one(self, monkeypatch):
        """测试超大上传只读取到大小上限多1字节"""
        monkeypatch.setattr(settings, "max_image_size", 16)
        self.handler.handle_create_task = AsyncMock(return_value={
            "task_id": "task_1",
            "status": "pending",
        })

        response = self.client.post(
            "/api/v1/videos/generations",
            files=[
                ("files", ("big.png", b"x" * 1000, "image/png")),
                ("files", ("small.png", b"y" * 8, "image/png")),
            ]
        )

        assert response.status_code == 200
        sources = self.handler.handle_create_task.call_args.args[1]
        assert [len(s.data) for s in sources] == [17, 8]

    def test_create_generation_validation_error(self):
        """测试校验失败返回400"""
        self.handler.handle_create_task = AsyncMock(
            side_effect=HTTPException(status_code=400, detail="Please upload at least one image")
        )

        response = self.client.post(
            "/api/v1/videos/generations",
            files=[("files", ("a.txt", b"hello", "text/plain"))]
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Please upload at least one image"

    def test_get_generation_progress(self):
        """测试查询任务进度"""
        self.handler.handle_get_task = AsyncMock(return_value={
            "task_id": "task_1",
            "status": "processing",
            "progress_message": "Still generating your video...",
            "poll_count": 2,
        })

        response = self.client.get("/api/v1/videos/generations/task_1")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Still generating your video..."
        assert body["data"]["poll_count"] == 2

    def test_download_video(self):
        """测试下载视频带 Content-Disposition"""
        self.handler.handle_get_video_content = AsyncMock(
            return_value=(b"mp4-data", "video/mp4", "pixshop-360-video_1.mp4")
        )

        response = self.client.get("/api/v1/videos/video_1/content")

        assert response.status_code == 200
        assert response.content == b"mp4-data"
        assert response.headers["content-type"] == "video/mp4"
        assert 'filename="pixshop-360-video_1.mp4"' in response.headers["content-disposition"]

    def test_delete_video(self):
        """测试删除视频"""
        self.handler.handle_delete_video = AsyncMock(return_value=None)

        response = self.client.delete("/api/v1/videos/video_1")

        assert response.status_code == 200
        assert response.json()["data"] == {"video_id": "video_1"}
        self.handler.handle_delete_video.assert_awaited_once_with("video_1", self.user)


@pytest.mark.integration
@pytest.mark.basic
class TestAdminEndpoints:
    """管理接口权限测试类"""

    def teardown_method(self):
        app.dependency_overrides.clear()

    def test_regular_user_is_forbidden(self):
        """测试普通用户访问管理接口返回403"""
        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_current_user] = lambda: MockBuilder.create_mock_user()

        response = TestClient(app).get("/api/v1/admin/users")

        assert response.status_code == 403
