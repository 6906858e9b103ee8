"""
ID生成工具模块
提供统一的ID生成方法
"""

import secrets
import uuid


def generate_uuid() -> str:
    """生成标准UUID字符串"""
    return str(uuid.uuid4())


def generate_id_with_prefix(prefix: str, id_type: str = "uuid") -> str:
    """
    生成带前缀的ID

    Args:
        prefix: ID前缀（如"task", "video", "model"等）
        id_type: ID类型，支持"uuid"、"hex"

    Returns:
        str: 带前缀的ID
    """
    if id_type == "uuid":
        id_part = generate_uuid()
    elif id_type == "hex":
        id_part = uuid.uuid4().hex
    else:
        raise ValueError(f"不支持的ID类型: {id_type}")

    return f"{prefix}_{id_part}"


# 常用ID前缀的快捷方法
def generate_task_id() -> str:
    """生成视频生成任务ID"""
    return generate_id_with_prefix("task", "hex")


def generate_video_id() -> str:
    """生成视频ID"""
    return generate_id_with_prefix("video", "hex")


def generate_model_id() -> str:
    """生成AI模型配置ID"""
    return generate_id_with_prefix("model", "hex")


def generate_reset_token() -> str:
    """生成密码重置令牌（URL安全）"""
    return secrets.token_urlsafe(32)
