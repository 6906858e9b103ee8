"""
日志消息模板模块
统一管理所有业务日志消息模板，便于维护和国际化
"""

from typing import Dict, Any


class LogMessages:
    """日志消息模板类"""

    # ==================== 通用日志消息 ====================
    START_OPERATION = "开始执行操作: {operation_name}"
    OPERATION_SUCCESS = "操作成功完成: {operation_name}"
    OPERATION_FAILED = "操作执行失败: {operation_name}"

    # ==================== 认证相关 ====================
    AUTH_SIGNUP_SUCCESS = "用户注册成功"
    AUTH_LOGIN_SUCCESS = "用户登录成功"
    AUTH_LOGIN_FAILED = "用户登录失败"
    AUTH_TOKEN_INVALID = "令牌校验失败"

    # ==================== 视频生成相关 ====================
    VIDEO_TASK_CREATED = "视频生成任务已创建"
    VIDEO_TASK_START = "开始执行视频生成任务"
    VIDEO_TASK_SUCCESS = "视频生成任务完成"
    VIDEO_TASK_FAILED = "视频生成任务失败"
    VIDEO_TASK_CANCELLED = "视频生成任务已取消"

    GENERATION_SUBMIT = "提交远程生成请求"
    GENERATION_POLL = "轮询远程生成状态"
    GENERATION_TERMINAL = "远程生成进入终态"

    # ==================== 文件存储相关 ====================
    FILE_UPLOAD_START = "开始文件上传"
    FILE_UPLOAD_SUCCESS = "文件上传成功"
    FILE_UPLOAD_FAILED = "文件上传失败"
    FILE_VALIDATION_FAILED = "文件验证失败"

    # ==================== 数据库操作相关 ====================
    DB_QUERY_START = "开始数据库查询"
    DB_QUERY_SUCCESS = "数据库查询成功"
    DB_QUERY_FAILED = "数据库查询失败"
    DB_UPDATE_START = "开始数据库更新"
    DB_UPDATE_SUCCESS = "数据库更新成功"
    DB_UPDATE_FAILED = "数据库更新失败"

    # ==================== 业务验证相关 ====================
    VALIDATION_PASSED = "验证通过"
    VALIDATION_FAILED = "验证失败"

    @classmethod
    def format_message(cls, message_template: str, **kwargs: Any) -> str:
        """格式化日志消息模板"""
        return message_template.format(**kwargs)

    @classmethod
    def get_structured_data(cls, **kwargs: Any) -> Dict[str, Any]:
        """获取结构化日志数据"""
        return kwargs


# 全局实例
log_messages = LogMessages()
