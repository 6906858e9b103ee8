"""Celery应用配置"""

from pathlib import Path

from celery import Celery
from celery.signals import worker_init
from kombu import Queue

from app.core.config import settings
from app.core.log_utils import get_logger

logger = get_logger(__name__)

# broker 与 result backend 使用不同的Redis数据库索引
celery_app = Celery(
    "pixshop_tasks",
    broker=settings.redis_url,
    backend=settings.celery_result_backend_url,
    include=[
        "app.services.tasks.video_generation_tasks",
    ],
)


@worker_init.connect
def on_worker_init(**kwargs):
    """
    Celery Worker 初始化时执行
    注册所有 AI Provider，确保 Worker 可以调用视频生成模型
    """
    logger.info("Celery Worker 初始化中，注册 AI Provider...")

    try:
        from app.core.ai.registry import register_all_providers
        register_all_providers()
        logger.info("AI Provider 注册完成")
    except Exception as e:
        logger.error("AI Provider 注册失败", exception=e)


# Celery配置
celery_app.conf.update(
    # 任务序列化
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # 任务执行配置
    task_always_eager=False,
    task_eager_propagate=True,
    task_ignore_result=False,

    # 视频生成耗时长，一次只预取一个任务
    task_acks_late=True,
    worker_prefetch_multiplier=1,

    # 路由配置
    task_routes={
        "app.services.tasks.video_generation_tasks.generate_video_task": {"queue": "video"},
    },

    # 队列配置
    task_default_queue="default",
    task_queues=(
        Queue("video", routing_key="video"),
        Queue("default", routing_key="default"),
    ),

    beat_schedule_filename=str(Path(settings.workspace_dir) / "celerybeat-schedule"),
)


def init_celery() -> Celery:
    """初始化Celery应用（用于依赖注入）"""
    return celery_app
