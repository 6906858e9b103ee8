"""
360°视频生成API端点
上传图片创建生成任务、查询/取消任务、视频列表、下载与删除
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import site_gate
from app.core.config import settings
from app.core.log_utils import get_logger
from app.db.database import get_db
from app.models.user import User
from app.schemas.common import StandardResponse
from app.schemas.video import VideoResponse, VideoTaskResponse
from app.services.video.generation_handler import VideoGenerationHandler
from app.services.video.generation_service import SourceImage

logger = get_logger(__name__)

router = APIRouter(tags=["360°视频生成"])


@router.post(
    "/generations",
    response_model=StandardResponse,
    summary="创建视频生成任务",
    description="上传1~4张图片，可选提示词与动画风格，任务在后台执行，返回任务ID供轮询"
)
async def create_generation(
    files: List[UploadFile] = File(..., description="源图片，多张会水平拼接"),
    prompt: str = Form("", description="补充描述"),
    animation_style: Optional[str] = Form(None, description="Slow Spin / Fast Spin / Orbit"),
    model_id: Optional[str] = Form(None, description="指定的视频生成模型ID"),
    user: User = Depends(site_gate),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    # 每张图片最多读取 max_image_size + 1 字节，超限由服务层校验拒绝
    sources = [
        SourceImage(
            filename=upload.filename or "",
            content_type=upload.content_type or "",
            data=await upload.read(settings.max_image_size + 1)
        )
        for upload in files
    ]

    handler = VideoGenerationHandler(db)
    task = await handler.handle_create_task(user, sources, prompt, animation_style, model_id)

    return StandardResponse(
        status="success",
        message="Video generation started",
        data=VideoTaskResponse.model_validate(task).model_dump()
    )


@router.get(
    "/generations/{task_id}",
    response_model=StandardResponse,
    summary="查询视频生成任务"
)
async def get_generation(
    task_id: str,
    user: User = Depends(site_gate),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = VideoGenerationHandler(db)
    task = await handler.handle_get_task(task_id, user)
    return StandardResponse(
        status="success",
        message=task["progress_message"] or "",
        data=VideoTaskResponse.model_validate(task).model_dump()
    )


@router.delete(
    "/generations/{task_id}",
    response_model=StandardResponse,
    summary="取消视频生成任务",
    description="停止等待结果；已提交的远程生成不会被中止"
)
async def cancel_generation(
    task_id: str,
    user: User = Depends(site_gate),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = VideoGenerationHandler(db)
    task = await handler.handle_cancel_task(task_id, user)
    return StandardResponse(
        status="success",
        message="Cancellation requested",
        data=VideoTaskResponse.model_validate(task).model_dump()
    )


@router.get(
    "",
    response_model=StandardResponse,
    summary="获取我的视频列表"
)
async def list_videos(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(site_gate),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = VideoGenerationHandler(db)
    result = await handler.handle_list_videos(user, skip, limit)
    return StandardResponse(
        status="success",
        message=f"Found {result['total']} videos",
        data={
            "items": [VideoResponse.model_validate(v).model_dump() for v in result["items"]],
            "total": result["total"]
        }
    )


@router.get(
    "/{video_id}/content",
    summary="下载视频文件"
)
async def get_video_content(
    video_id: str,
    user: User = Depends(site_gate),
    db: AsyncSession = Depends(get_db)
) -> Response:
    handler = VideoGenerationHandler(db)
    data, mime_type, download_name = await handler.handle_get_video_content(video_id, user)
    return Response(
        content=data,
        media_type=mime_type,
        headers={"Content-Disposition": f'attachment; filename="{download_name}"'}
    )


@router.delete(
    "/{video_id}",
    response_model=StandardResponse,
    summary="删除视频"
)
async def delete_video(
    video_id: str,
    user: User = Depends(site_gate),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = VideoGenerationHandler(db)
    await handler.handle_delete_video(video_id, user)
    logger.info("视频删除成功", video_id=video_id, user_id=user.id)
    return StandardResponse(status="success", message="Video deleted", data={"video_id": video_id})
