"""
360°视频生成 Celery 任务

远程生成通常需要数分钟，放在 worker 中执行，
进度、结果与错误都写回 video_generation_tasks 表，由前端轮询读取。
"""

from typing import Any, Dict

from app.core.log_utils import get_logger
from app.services.tasks.celery_app import celery_app
from app.utils.async_utils import AsyncRunner

logger = get_logger(__name__)


@celery_app.task(
    bind=True,
    time_limit=1800,
    soft_time_limit=1740,
    queue='video'
)
def generate_video_task(self, task_id: str) -> Dict[str, Any]:
    """
    执行视频生成任务

    Args:
        task_id: video_generation_tasks 表中的任务ID

    Returns:
        任务状态字典
    """
    logger.info("开始执行视频生成任务", task_id=task_id, celery_task_id=self.request.id)

    try:
        return _execute_video_generation(task_id)
    except Exception as exc:
        return _handle_generation_error(task_id, exc)


def _execute_video_generation(task_id: str) -> Dict[str, Any]:
    """在独立事件循环中运行生成服务"""
    from app.db.database import AsyncSessionLocal
    from app.services.video.generation_service import VideoGenerationService

    with AsyncRunner() as runner:
        async def do_generation():
            async with AsyncSessionLocal() as db:
                return await VideoGenerationService(db).run_task(task_id)

        result = runner.run(do_generation())

    if result is None:
        return {"task_id": task_id, "status": "missing"}
    return result


def _handle_generation_error(task_id: str, error: Exception) -> Dict[str, Any]:
    """
    处理服务未能自行收尾的异常（如数据库不可用）

    尝试将任务标记为失败，不进行重试
    """
    logger.error("视频生成任务异常", task_id=task_id, exception=error)

    try:
        from app.db.database import AsyncSessionLocal
        from app.models.video_generation_task import TaskStatus
        from app.repositories.video_generation_task import VideoGenerationTaskRepository
        from app.utils.async_utils import run_async
        from app.utils.datetime_utils import utc_now

        async def update_failed_status():
            async with AsyncSessionLocal() as db:
                await VideoGenerationTaskRepository(db).update(
                    task_id,
                    status=TaskStatus.FAILED.value,
                    error_message=f"Failed to generate the video. {error}",
                    completed_at=utc_now()
                )

        run_async(update_failed_status())
    except Exception as update_exc:
        logger.error("标记任务失败状态失败", task_id=task_id, exception=update_exc)

    return {"task_id": task_id, "status": "failed", "error": str(error)}
