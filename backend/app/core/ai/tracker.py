"""
MLflow追踪Mixin
为视频生成Provider提供span级别的调用追踪
"""

import time
from typing import Any, Callable, Dict

import mlflow

from app.core.log_utils import get_logger
from app.core.mlflow_tracker import get_mlflow_tracker, ensure_mlflow_initialized

logger = get_logger(__name__)


class MLflowTracingMixin:
    """MLflow追踪Mixin类

    需要子类提供 model_config 属性
    """

    def __init__(self):
        self.mlflow_tracker = get_mlflow_tracker()
        self._initialize_mlflow()

    def _initialize_mlflow(self):
        try:
            if ensure_mlflow_initialized():
                logger.info(
                    "MLflow追踪已启用",
                    operation="ai_provider_mlflow_init_success",
                    provider=self.__class__.__name__
                )
        except Exception as e:
            logger.error(
                "初始化MLflow追踪时出现错误",
                operation="ai_provider_mlflow_init_error",
                provider=self.__class__.__name__,
                exception=e
            )

    def _get_model_name(self) -> str:
        """获取模型名称"""
        if hasattr(self, 'model_config') and hasattr(self.model_config, 'model_name'):
            return self.model_config.model_name
        return "unknown"

    async def _with_mlflow_trace(
        self,
        operation_name: str,
        inputs: Dict[str, Any],
        call_func: Callable,
    ) -> Any:
        """
        在MLflow span中执行一次远程调用

        Args:
            operation_name: 操作名称（如 start_generation / get_operation）
            inputs: 记录到span的输入参数
            call_func: 实际执行的协程函数

        Returns:
            call_func 的返回值
        """
        if not self.mlflow_tracker.is_initialized:
            return await call_func()

        model_name = self._get_model_name()
        span_name = f"{self.__class__.__name__}_{model_name}_{operation_name}"
        start_time = time.time()

        try:
            with mlflow.start_span(name=span_name, span_type="CHAIN") as span:
                span.set_inputs(inputs)
                try:
                    result = await call_func()
                except Exception as e:
                    span.set_attribute("success", False)
                    span.set_attribute("error_type", type(e).__name__)
                    span.set_attribute("error_message", str(e))
                    raise

                status = getattr(result, "status", None)
                span.set_outputs({
                    "status": getattr(status, "value", status),
                    "result_locator": getattr(result, "result_locator", None),
                    "failure_reason": getattr(result, "failure_reason", None),
                })
                span.set_attribute("success", True)
                return result
        finally:
            logger.info(
                f"{operation_name}完成",
                operation=f"ai_provider_{operation_name}",
                provider=self.__class__.__name__,
                model=model_name,
                duration_seconds=round(time.time() - start_time, 3)
            )
