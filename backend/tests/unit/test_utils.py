"""
工具函数单元测试
ID生成与日期时间计算
"""

from datetime import datetime

import pytest

from app.utils.datetime_utils import (
    days_ago,
    format_datetime_iso,
    get_month_start,
    get_today_start,
    get_week_start,
    is_expired,
)
from app.utils.id_utils import (
    generate_id_with_prefix,
    generate_reset_token,
    generate_task_id,
    generate_video_id,
)


@pytest.mark.unit
class TestIdUtils:
    """ID生成测试类"""

    def test_prefixed_ids(self):
        """测试带前缀ID格式"""
        task_id = generate_task_id()
        video_id = generate_video_id()

        assert task_id.startswith("task_")
        assert video_id.startswith("video_")
        assert len(task_id) == len("task_") + 32

    def test_ids_are_unique(self):
        """测试ID唯一性"""
        ids = {generate_task_id() for _ in range(200)}
        assert len(ids) == 200

    def test_unsupported_id_type(self):
        """测试不支持的ID类型"""
        with pytest.raises(ValueError):
            generate_id_with_prefix("task", "nanoid")

    def test_reset_token_is_url_safe(self):
        """测试重置令牌只包含URL安全字符"""
        token = generate_reset_token()
        assert len(token) >= 32
        assert all(c.isalnum() or c in "-_" for c in token)


@pytest.mark.unit
class TestDatetimeUtils:
    """日期时间工具测试类"""

    NOW = datetime(2026, 10, 15, 13, 45, 10)  # 周四

    def test_period_starts(self):
        """测试今日、本周、本月起点"""
        assert get_today_start(self.NOW) == datetime(2026, 10, 15)
        assert get_week_start(self.NOW) == datetime(2026, 10, 12)
        assert get_month_start(self.NOW) == datetime(2026, 10, 1)

    def test_days_ago(self):
        """测试N天前"""
        assert days_ago(7, self.NOW) == datetime(2026, 10, 8, 13, 45, 10)

    def test_is_expired(self):
        """测试过期判断"""
        assert is_expired(datetime(2026, 10, 15, 13, 0), check_time=self.NOW)
        assert not is_expired(datetime(2026, 10, 15, 14, 0), check_time=self.NOW)

    def test_format_iso(self):
        """测试ISO格式化（无时区按UTC处理）"""
        assert format_datetime_iso(self.NOW) == "2026-10-15T13:45:10+00:00"
        assert format_datetime_iso(None) is None
