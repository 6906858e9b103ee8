"""
管理后台API端点（仅超级管理员）
运营统计、用户管理、站点访问开关与维护模式
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_super_admin
from app.core.log_utils import get_logger
from app.db.database import get_db
from app.models.user import User
from app.schemas.common import StandardResponse
from app.schemas.site import MaintenanceUpdate, SiteAccessUpdate
from app.services.admin.handler import AdminHandler
from app.services.site.handler import SiteSettingsHandler

logger = get_logger(__name__)

router = APIRouter(tags=["管理后台"])


@router.get(
    "/analytics",
    response_model=StandardResponse,
    summary="运营统计",
    description="用户数、视频数以及今日/本周/本月新增"
)
async def get_analytics(
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = AdminHandler(db)
    return StandardResponse(status="success", message="", data=await handler.handle_get_analytics())


@router.get(
    "/users",
    response_model=StandardResponse,
    summary="用户列表"
)
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = AdminHandler(db)
    result = await handler.handle_list_users(skip, limit)
    return StandardResponse(status="success", message=f"Found {result['total']} users", data=result)


@router.delete(
    "/users/{user_id}",
    response_model=StandardResponse,
    summary="删除用户",
    description="同时删除该用户的全部视频文件与记录"
)
async def delete_user(
    user_id: str,
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = AdminHandler(db)
    await handler.handle_delete_user(user_id, admin.id)
    logger.info("管理员删除用户", user_id=user_id, admin_id=admin.id)
    return StandardResponse(status="success", message="User deleted", data={"user_id": user_id})


@router.get(
    "/site-access",
    response_model=StandardResponse,
    summary="获取站点访问开关"
)
async def get_site_access(
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = SiteSettingsHandler(db)
    site_status = await handler.handle_get_status()
    return StandardResponse(
        status="success",
        message="",
        data={"site_access_enabled": site_status["site_access_enabled"]}
    )


@router.put(
    "/site-access",
    response_model=StandardResponse,
    summary="更新站点访问开关"
)
async def update_site_access(
    request: SiteAccessUpdate,
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = SiteSettingsHandler(db)
    data = await handler.handle_set_site_access(request.is_enabled, admin.id)
    return StandardResponse(status="success", message="Site access updated", data=data)


@router.get(
    "/maintenance",
    response_model=StandardResponse,
    summary="获取维护模式设置"
)
async def get_maintenance(
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = SiteSettingsHandler(db)
    return StandardResponse(status="success", message="", data=await handler.handle_get_maintenance())


@router.put(
    "/maintenance",
    response_model=StandardResponse,
    summary="更新维护模式设置"
)
async def update_maintenance(
    request: MaintenanceUpdate,
    admin: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
) -> StandardResponse:
    handler = SiteSettingsHandler(db)
    data = await handler.handle_set_maintenance(request.model_dump(exclude_unset=True), admin.id)
    return StandardResponse(status="success", message="Maintenance settings updated", data=data)
