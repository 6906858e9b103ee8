"""
测试工具包
提供统一的测试工具和辅助函数
"""

from .media_utils import make_image_bytes
from .mock_utils import MockBuilder, RecordingFetcher, ScriptedVideoProvider

__all__ = [
    'make_image_bytes',
    'MockBuilder',
    'RecordingFetcher',
    'ScriptedVideoProvider',
]
