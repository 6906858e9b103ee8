"""
配置工具模块
处理配置路径计算与配置值解析
"""

import json
import logging
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


def get_project_root() -> Path:
    """获取项目根目录路径（backend 的上一级）"""
    return Path(__file__).parent.parent.parent.parent


def get_workspace_path(sub_path: str = "") -> Path:
    """获取workspace目录路径"""
    workspace_dir = get_project_root() / "workspace"
    if sub_path:
        return workspace_dir / sub_path
    return workspace_dir


def get_config_path(sub_path: str = "") -> Path:
    """获取config目录路径"""
    config_dir = get_project_root() / "config"
    if sub_path:
        return config_dir / sub_path
    return config_dir


def parse_list_config(value: str, separator: str = ",") -> List[str]:
    """解析逗号分隔的配置字符串为列表"""
    if not value:
        return []
    return [item.strip().lower() for item in value.split(separator) if item.strip()]


def parse_json_config(value: str) -> List[str]:
    """解析JSON格式的配置字符串"""
    if not value:
        return []
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning(f"JSON配置解析失败: {value}")
        return []
