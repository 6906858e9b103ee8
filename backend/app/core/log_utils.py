"""
统一日志管理模块
在标准库 logging 之上提供结构化的业务日志记录
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any

from app.core.config import settings
from app.core.log_messages import log_messages


class UnifiedLogger:
    """统一的业务日志记录器，提供结构化日志记录功能"""

    def __init__(self, name: str):
        """初始化日志记录器"""
        self.logger = logging.getLogger(name)
        self.name = name

    def _format_extra_data(self, **kwargs: Any) -> Dict[str, Any]:
        """格式化日志额外数据"""
        return log_messages.get_structured_data(
            log_module=self.name,
            **kwargs
        )

    @staticmethod
    def _render(message_template: str, **kwargs: Any) -> str:
        """
        渲染消息模板

        只有提供了格式化参数时才进行格式化，避免对已格式化的字符串
        （例如包含字典的 f-string）再次格式化。
        """
        if not kwargs:
            return message_template
        try:
            return log_messages.format_message(message_template, **kwargs)
        except (KeyError, ValueError, IndexError):
            return message_template

    def _log(
        self,
        level: int,
        message_template: str,
        exception: Optional[BaseException] = None,
        **kwargs: Any
    ) -> None:
        message = self._render(message_template, **kwargs)
        extra_data = self._format_extra_data(**kwargs)

        if exception is not None:
            extra_data.update({
                "exception_type": type(exception).__name__,
                "exception_message": str(exception)
            })
            self.logger.log(level, message, extra=extra_data, exc_info=exception)
        else:
            self.logger.log(level, message, extra=extra_data)

    def info(self, message_template: str, **kwargs: Any) -> None:
        """
        记录信息级别日志

        示例:
            logger.info("简单消息")
            logger.info("{operation} 完成", operation="测试")
        """
        self._log(logging.INFO, message_template, **kwargs)

    def error(self, message_template: str, exception: Optional[BaseException] = None, **kwargs: Any) -> None:
        """
        记录错误级别日志

        Args:
            message_template: 日志消息，可以是格式化模板或已格式化的字符串
            exception: 异常对象（可选），附带异常类型、消息与堆栈
            **kwargs: 格式化参数（可选）
        """
        self._log(logging.ERROR, message_template, exception=exception, **kwargs)

    def warning(self, message_template: str, **kwargs: Any) -> None:
        """记录警告级别日志"""
        self._log(logging.WARNING, message_template, **kwargs)

    def debug(self, message_template: str, **kwargs: Any) -> None:
        """记录调试级别日志（仅在调试模式下输出）"""
        if settings.app_debug:
            self._log(logging.DEBUG, message_template, **kwargs)

    def critical(self, message_template: str, **kwargs: Any) -> None:
        """记录严重错误级别日志"""
        self._log(logging.CRITICAL, message_template, **kwargs)


# 全局日志实例缓存
_loggers_cache: Dict[str, UnifiedLogger] = {}


def get_logger(name: str = __name__) -> UnifiedLogger:
    """
    获取统一的业务日志记录器

    Args:
        name: 日志记录器名称，默认为当前模块名

    Returns:
        UnifiedLogger实例
    """
    if name not in _loggers_cache:
        _loggers_cache[name] = UnifiedLogger(name)
    return _loggers_cache[name]


def setup_logging() -> None:
    """配置全局日志系统"""
    log_dir = Path(settings.workspace_dir) / "log"
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    log_level = logging.DEBUG if settings.app_debug else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )
    root_logger.setLevel(log_level)

    # 清除现有的处理器
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_dir / settings.log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    formatter = logging.Formatter(settings.log_format)
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # 第三方库只保留警告及以上
    third_party_loggers = [
        "uvicorn", "fastapi", "sqlalchemy", "httpx", "httpcore",
        "celery", "google_genai", "mlflow",
    ]
    for logger_name in third_party_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    config_logger = get_logger(__name__)
    config_logger.info(log_messages.OPERATION_SUCCESS, operation_name="日志系统配置")


# 导出常用函数别名，方便使用
logger = get_logger
