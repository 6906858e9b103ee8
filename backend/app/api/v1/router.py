"""
API路由聚合模块
将所有v1版本的路由统一注册

路由管理规范：
1. 所有路由文件内部使用相对路径（不以/开头）
2. 所有前缀统一在router.py中管理
3. Tags统一使用中文，与端点文件定义保持一致
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    admin,
    ai_model,
    auth,
    site,
    videos,
)

api_router = APIRouter()

# ==================== 用户认证路由 ====================
api_router.include_router(auth.router, prefix="/auth", tags=["用户认证"])

# ==================== 360°视频生成路由 ====================
api_router.include_router(videos.router, prefix="/videos", tags=["360°视频生成"])

# ==================== 站点状态路由 ====================
api_router.include_router(site.router, prefix="/site", tags=["站点状态"])

# ==================== 管理后台路由 ====================
api_router.include_router(admin.router, prefix="/admin", tags=["管理后台"])
api_router.include_router(ai_model.router, prefix="/admin/models", tags=["AI模型管理"])
