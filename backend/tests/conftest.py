"""
测试配置和fixtures
为所有测试提供共享的配置和fixtures

单元测试不依赖数据库、Redis或外部服务；
接口测试使用 FastAPI TestClient 并覆盖依赖项。
"""

import os
from pathlib import Path
from typing import Callable, List

import pytest

# 在导入 app 之前固定测试配置
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pixshop-unit-tests")
os.environ.setdefault("ENABLE_MLFLOW", "false")
os.environ.setdefault("CREATE_DEFAULT_ADMIN", "false")

from tests.utils.media_utils import make_image_bytes  # noqa: E402


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    """图片字节工厂"""
    return make_image_bytes


@pytest.fixture
def sample_images() -> List[bytes]:
    """两张不同高度的图片"""
    return [
        make_image_bytes(40, 30, (255, 0, 0, 255)),
        make_image_bytes(20, 50, (0, 0, 255, 255)),
    ]


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    """本地存储临时目录"""
    directory = tmp_path / "storage"
    directory.mkdir()
    return directory


# 测试标记配置
def pytest_configure(config):
    """配置pytest标记"""
    config.addinivalue_line("markers", "unit: 单元测试")
    config.addinivalue_line("markers", "integration: 集成测试")
    config.addinivalue_line("markers", "basic: 基础功能测试")
    config.addinivalue_line("markers", "imports: 模块导入测试")
    config.addinivalue_line("markers", "logging: 日志系统测试")
