"""
AI模型管理业务处理器（统一架构）
处理AI模型的CRUD操作
"""

from typing import Dict, Any, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.ai_model.management_service import ManagementService
from app.core.log_utils import get_logger

logger = get_logger(__name__)


class ManagementHandler:
    """AI模型管理业务处理器"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.management_service = ManagementService(db)

    async def handle_list_models(
        self,
        enabled_only: bool = True,
        capability: Optional[str] = None
    ) -> Dict[str, Any]:
        """处理获取模型列表请求"""
        try:
            models = await self.management_service.list_models(
                enabled_only=enabled_only,
                capability=capability
            )
            return {
                "items": models,
                "total": len(models)
            }
        except Exception as e:
            logger.error("获取AI模型列表失败", capability=capability, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"获取模型列表失败: {str(e)}"
            ) from e

    async def handle_get_model_for_edit(self, model_id: str) -> Dict[str, Any]:
        """处理获取模型详情请求"""
        try:
            model = await self.management_service.get_model_for_edit(model_id)
        except Exception as e:
            logger.error("获取AI模型详情失败", model_id=model_id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"获取模型详情失败: {str(e)}"
            ) from e

        if not model:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="模型不存在")
        return model

    async def handle_create_model(self, model_data: Dict[str, Any]) -> Dict[str, Any]:
        """处理创建模型请求"""
        try:
            return await self.management_service.create_model(model_data)
        except ValueError as e:
            logger.warning("创建AI模型参数错误", error=str(e))
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            logger.error("创建AI模型失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"创建模型失败: {str(e)}"
            ) from e

    async def handle_update_model(self, model_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """处理更新模型请求"""
        try:
            updated_model = await self.management_service.update_model(model_id, update_data)
        except Exception as e:
            logger.error("更新AI模型失败", model_id=model_id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"更新模型失败: {str(e)}"
            ) from e

        if not updated_model:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="模型不存在")
        return updated_model

    async def handle_delete_model(self, model_id: str) -> bool:
        """处理删除模型请求"""
        try:
            success = await self.management_service.delete_model(model_id)
        except Exception as e:
            logger.error("删除AI模型失败", model_id=model_id, exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"删除模型失败: {str(e)}"
            ) from e

        if not success:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="模型不存在")
        return True
