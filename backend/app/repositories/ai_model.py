"""
AI模型数据访问层（统一架构）
"""

from typing import List, Optional
from sqlalchemy import select, update, and_

from app.models.ai_model import AIModel
from .base import BaseRepository


class AIModelRepository(BaseRepository):
    """AI模型Repository"""

    @property
    def model(self):
        return AIModel

    async def list_models(
        self,
        enabled_only: bool = True,
        capability: Optional[str] = None
    ) -> List[AIModel]:
        """获取模型列表

        Args:
            enabled_only: 是否只返回启用的模型
            capability: 按能力过滤（如 'video_gen'）
        """
        query = select(AIModel)

        conditions = []
        if enabled_only:
            conditions.append(AIModel.is_enabled.is_(True))
        if capability:
            conditions.append(AIModel.capabilities.contains([capability]))

        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(AIModel.is_default.desc(), AIModel.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_default_model(self, capability: Optional[str] = None) -> Optional[AIModel]:
        """获取默认模型（只在启用的模型中查找）"""
        conditions = [
            AIModel.is_default.is_(True),
            AIModel.is_enabled.is_(True)
        ]
        if capability:
            conditions.append(AIModel.capabilities.contains([capability]))

        query = select(AIModel).where(and_(*conditions)).order_by(AIModel.updated_at.desc())
        result = await self.db.execute(query)
        return result.scalars().first()

    async def get_model_by_name(self, name: str) -> Optional[AIModel]:
        """根据显示名称获取模型"""
        query = select(AIModel).where(AIModel.name == name)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def clear_default(self, capability: str, exclude_id: Optional[str] = None) -> None:
        """取消某能力下其他模型的默认标记，保证每种能力最多一个默认模型"""
        conditions = [
            AIModel.is_default.is_(True),
            AIModel.capabilities.contains([capability])
        ]
        if exclude_id:
            conditions.append(AIModel.id != exclude_id)

        await self.db.execute(
            update(AIModel).where(and_(*conditions)).values(is_default=False)
        )
        await self.db.commit()
