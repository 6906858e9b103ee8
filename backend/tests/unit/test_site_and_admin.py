"""
站点设置与管理后台服务单元测试
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.services.admin.admin_service import AdminService
from app.services.site.site_settings_service import (
    DEFAULT_MAINTENANCE,
    MAINTENANCE_KEY,
    SITE_ACCESS_KEY,
    SiteSettingsService,
)
from tests.utils import MockBuilder


class InMemorySettings:
    """内存版 site_settings 仓储"""

    def __init__(self, values=None):
        self.values = dict(values or {})

    async def get_value(self, key):
        value = self.values.get(key)
        return dict(value) if value is not None else None

    async def set_value(self, key, value, updated_by=None):
        self.values[key] = dict(value)


@pytest.mark.unit
class TestSiteSettingsService:
    """SiteSettingsService 测试类"""

    def setup_method(self):
        self.service = SiteSettingsService(MockBuilder.create_mock_db_session())
        self.service.repository = InMemorySettings()

    @pytest.mark.asyncio
    async def test_defaults_when_unset(self):
        """测试从未设置时站点开放、未维护"""
        assert await self.service.get_site_access() is True
        assert await self.service.get_maintenance() == DEFAULT_MAINTENANCE
        assert await self.service.get_block_reason() is None

    @pytest.mark.asyncio
    async def test_partial_maintenance_update(self):
        """测试维护模式部分更新，未知字段被忽略"""
        await self.service.set_maintenance({"is_maintenance_mode": True, "unknown": 1}, updated_by="admin")
        await self.service.set_maintenance({"maintenance_message": "Back at 5pm"})

        stored = self.service.repository.values[MAINTENANCE_KEY]
        assert stored["is_maintenance_mode"] is True
        assert stored["maintenance_message"] == "Back at 5pm"
        assert "unknown" not in stored

    @pytest.mark.asyncio
    async def test_block_reason_for_maintenance(self):
        """测试维护模式下的拦截信息"""
        await self.service.set_maintenance({
            "is_maintenance_mode": True,
            "maintenance_title": "Upgrading",
            "estimated_completion": "2 hours",
        })

        block = await self.service.get_block_reason()

        assert block["title"] == "Upgrading"
        assert block["estimated_completion"] == "2 hours"

    @pytest.mark.asyncio
    async def test_block_reason_for_disabled_site(self):
        """测试站点关闭时的拦截信息"""
        await self.service.set_site_access(False)

        assert self.service.repository.values[SITE_ACCESS_KEY] == {"enabled": False}
        block = await self.service.get_block_reason()
        assert block is not None
        assert "disabled" in block["message"]

    @pytest.mark.asyncio
    async def test_status(self):
        """测试公开状态"""
        status = await self.service.get_status()
        assert status["site_access_enabled"] is True
        assert status["is_maintenance_mode"] is False


@pytest.mark.unit
class TestAdminService:
    """AdminService 测试类"""

    def setup_method(self):
        self.service = AdminService(MockBuilder.create_mock_db_session())
        self.service.users = AsyncMock()
        self.service.videos = AsyncMock()

    @pytest.mark.asyncio
    async def test_analytics_keys(self):
        """测试统计字段"""
        self.service.users.count.return_value = 3
        self.service.videos.count.return_value = 7

        analytics = await self.service.get_analytics()

        assert analytics["total_users"] == 3
        assert analytics["total_videos"] == 7
        assert set(analytics) == {
            "total_users", "total_videos", "new_users_this_month", "new_videos_this_month",
            "videos_today", "videos_this_week", "videos_this_month",
        }

    @pytest.mark.asyncio
    async def test_cannot_delete_self(self):
        """测试管理员不能删除自己"""
        with pytest.raises(ValueError):
            await self.service.delete_user("admin-1", acting_admin_id="admin-1")

    @pytest.mark.asyncio
    async def test_delete_user_removes_video_files(self):
        """测试删除用户时删除其视频文件与记录"""
        self.service.users.get_by_id.return_value = MockBuilder.create_mock_user()
        self.service.videos.list_by_user.return_value = [
            MockBuilder.create_mock_video("video_1"),
            MockBuilder.create_mock_video("video_2"),
        ]
        storage = AsyncMock()

        with patch("app.services.admin.admin_service.get_video_storage", return_value=storage):
            assert await self.service.delete_user("user-1", acting_admin_id="admin-1") is True

        assert storage.delete.await_count == 2
        self.service.videos.delete_by_user.assert_awaited_once_with("user-1")
        self.service.users.delete.assert_awaited_once_with("user-1")

    @pytest.mark.asyncio
    async def test_delete_missing_user(self):
        """测试删除不存在的用户"""
        self.service.users.get_by_id.return_value = None
        assert await self.service.delete_user("nobody") is False
