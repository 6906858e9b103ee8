"""
MLflow追踪器模块
为视频生成Provider的远程调用提供追踪能力
"""

import mlflow

from app.core.config import settings
from app.core.log_utils import get_logger

logger = get_logger(__name__)


class MLflowTracker:
    """MLflow追踪器"""

    def __init__(self):
        self.is_initialized = False
        self.autolog_enabled = False

    def initialize(self) -> bool:
        """初始化MLflow追踪器，未启用时直接返回False"""
        if self.is_initialized:
            return True

        if not settings.enable_mlflow:
            logger.info("MLflow追踪已被禁用")
            return False

        try:
            mlflow.set_tracking_uri(settings.mlflow_tracking_uri)

            try:
                experiment = mlflow.get_experiment_by_name(settings.mlflow_experiment_name)
                if experiment is None:
                    mlflow.create_experiment(settings.mlflow_experiment_name)
                mlflow.set_experiment(settings.mlflow_experiment_name)
                logger.info(
                    "MLflow实验已设置",
                    experiment_name=settings.mlflow_experiment_name
                )
            except Exception as e:
                logger.warning("MLflow实验设置失败", error=str(e))

            self.is_initialized = True
            logger.info("MLflow追踪器初始化成功", tracking_uri=settings.mlflow_tracking_uri)
            return True

        except Exception as e:
            logger.error("MLflow追踪器初始化失败", exception=e)
            return False

    def enable_gemini_autolog(self) -> bool:
        """启用Gemini SDK自动追踪"""
        if not self.is_initialized:
            if not self.initialize():
                logger.warning("MLflow未初始化，无法启用Gemini自动追踪")
                return False

        try:
            mlflow.gemini.autolog()
            self.autolog_enabled = True
            logger.info("Gemini自动追踪已启用")
            return True

        except Exception as e:
            logger.error("启用Gemini自动追踪失败", exception=e)
            return False


# 全局MLflow追踪器实例
mlflow_tracker = MLflowTracker()


def get_mlflow_tracker() -> MLflowTracker:
    """获取MLflow追踪器实例"""
    return mlflow_tracker


def ensure_mlflow_initialized() -> bool:
    """确保MLflow已初始化并启用Gemini自动追踪"""
    tracker = get_mlflow_tracker()
    if not tracker.is_initialized:
        tracker.initialize()
    if tracker.is_initialized and not tracker.autolog_enabled:
        tracker.enable_gemini_autolog()
    return tracker.is_initialized
