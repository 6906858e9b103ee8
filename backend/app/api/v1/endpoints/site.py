"""
站点状态API端点（无需登录）
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.schemas.common import StandardResponse
from app.services.site.handler import SiteSettingsHandler

router = APIRouter(tags=["站点状态"])


@router.get(
    "/status",
    response_model=StandardResponse,
    summary="获取站点状态",
    description="站点是否开放以及维护模式信息，前端据此决定是否展示维护页"
)
async def get_site_status(db: AsyncSession = Depends(get_db)) -> StandardResponse:
    handler = SiteSettingsHandler(db)
    return StandardResponse(status="success", message="", data=await handler.handle_get_status())
