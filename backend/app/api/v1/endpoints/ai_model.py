"""
视频生成模型管理API端点（仅超级管理员）
模型的增删改查；创建任务时可通过 model_id 指定其中一个已启用的模型
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_super_admin
from app.core.log_utils import get_logger
from app.db.database import get_db
from app.models.user import User
from app.schemas.ai_model import AIModelCreate, AIModelResponse, AIModelUpdate
from app.schemas.common import StandardResponse
from app.services.ai_model.management.handler import ManagementHandler

logger = get_logger(__name__)

router = APIRouter(tags=["视频模型管理"])


@router.get(
    "",
    response_model=StandardResponse,
    summary="获取视频模型列表",
    description="API密钥已脱敏；默认返回全部模型，包括未启用的"
)
async def list_ai_models(
    enabled_only: bool = Query(False, description="只返回启用的模型"),
    capability: Optional[str] = Query(None, description="按能力过滤，如 video_gen"),
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = ManagementHandler(db)
    result = await handler.handle_list_models(enabled_only=enabled_only, capability=capability)
    items = [AIModelResponse.model_validate(model).model_dump() for model in result["items"]]
    return StandardResponse(
        status="success",
        message=f"Found {result['total']} models",
        data={"items": items, "total": result["total"]}
    )


@router.get(
    "/{model_id}",
    response_model=StandardResponse,
    summary="获取视频模型详情",
    description="用于编辑，包含完整的API密钥"
)
async def get_ai_model(
    model_id: str,
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = ManagementHandler(db)
    model = await handler.handle_get_model_for_edit(model_id)
    return StandardResponse(status="success", message="", data=model)


@router.post(
    "",
    response_model=StandardResponse,
    summary="添加视频模型"
)
async def create_ai_model(
    model_data: AIModelCreate,
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = ManagementHandler(db)
    new_model = await handler.handle_create_model(model_data.model_dump())
    logger.info("管理员添加视频模型", model_id=new_model["id"], admin_id=admin.id)
    return StandardResponse(
        status="success",
        message="Model created",
        data=AIModelResponse.model_validate(new_model).model_dump()
    )


@router.put(
    "/{model_id}",
    response_model=StandardResponse,
    summary="更新视频模型",
    description="只更新请求中出现的字段；设为默认会取消同能力其他模型的默认标记"
)
async def update_ai_model(
    model_id: str,
    update_data: AIModelUpdate,
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = ManagementHandler(db)
    updated_model = await handler.handle_update_model(
        model_id, update_data.model_dump(exclude_unset=True)
    )
    logger.info("管理员更新视频模型", model_id=model_id, admin_id=admin.id)
    return StandardResponse(
        status="success",
        message="Model updated",
        data=AIModelResponse.model_validate(updated_model).model_dump()
    )


@router.delete(
    "/{model_id}",
    response_model=StandardResponse,
    summary="删除视频模型"
)
async def delete_ai_model(
    model_id: str,
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = ManagementHandler(db)
    await handler.handle_delete_model(model_id)
    logger.info("管理员删除视频模型", model_id=model_id, admin_id=admin.id)
    return StandardResponse(status="success", message="Model deleted", data={"model_id": model_id})
