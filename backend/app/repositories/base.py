"""
Repository基础类
定义通用的数据访问接口和方法
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Type, TypeVar

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.log_utils import get_logger
from app.core.log_messages import log_messages
from app.utils.id_utils import generate_uuid

ModelType = TypeVar("ModelType")

logger = get_logger(__name__)


class BaseRepository(ABC):
    """Repository基础类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @property
    @abstractmethod
    def model(self) -> Type[ModelType]:
        """返回Repository对应的模型类"""

    @property
    def _model_name(self) -> str:
        return self.model.__name__

    def _primary_key(self):
        return self.model.__mapper__.primary_key[0]

    async def get_by_id(self, record_id: Any) -> Optional[ModelType]:
        """根据主键获取单个记录"""
        try:
            query = select(self.model).filter(self._primary_key() == record_id)
            result = await self.db.execute(query)
            record = result.scalars().first()

            if not record:
                logger.warning("记录不存在",
                               operation_name="get_by_id",
                               record_id=record_id,
                               model_name=self._model_name)
            return record

        except Exception as e:
            logger.error(log_messages.DB_QUERY_FAILED,
                         operation_name="get_by_id",
                         record_id=record_id,
                         model_name=self._model_name,
                         exception=e)
            raise

    async def create(self, **kwargs) -> ModelType:
        """创建新记录，未提供 id 时自动生成UUID"""
        try:
            # 只记录字段名，避免把密码哈希、令牌写入日志
            logger.info(log_messages.DB_UPDATE_START,
                        operation_name="create",
                        model_name=self._model_name,
                        fields=sorted(kwargs.keys()))

            if hasattr(self.model, 'id') and 'id' not in kwargs:
                kwargs['id'] = generate_uuid()

            instance = self.model(**kwargs)
            self.db.add(instance)
            await self.db.commit()
            await self.db.refresh(instance)

            logger.info(log_messages.DB_UPDATE_SUCCESS,
                        operation_name="create",
                        model_name=self._model_name,
                        record_id=getattr(instance, 'id', None))

            return instance

        except Exception as e:
            await self.db.rollback()
            logger.error(log_messages.DB_UPDATE_FAILED,
                         operation_name="create",
                         model_name=self._model_name,
                         exception=e)
            raise

    async def update(self, record_id: Any, **kwargs) -> Optional[ModelType]:
        """更新记录，记录不存在时返回None"""
        try:
            instance = await self.get_by_id(record_id)
            if not instance:
                logger.warning("更新失败：记录不存在",
                               operation_name="update",
                               record_id=record_id,
                               model_name=self._model_name)
                return None

            changed_fields = []
            for key, value in kwargs.items():
                if hasattr(instance, key):
                    if getattr(instance, key) != value:
                        changed_fields.append(key)
                    setattr(instance, key, value)

            await self.db.commit()
            await self.db.refresh(instance)

            logger.info(log_messages.DB_UPDATE_SUCCESS,
                        operation_name="update",
                        record_id=record_id,
                        model_name=self._model_name,
                        changed_fields=changed_fields)

            return instance

        except Exception as e:
            await self.db.rollback()
            logger.error(log_messages.DB_UPDATE_FAILED,
                         operation_name="update",
                         record_id=record_id,
                         model_name=self._model_name,
                         exception=e)
            raise

    async def delete(self, record_id: Any) -> bool:
        """删除记录"""
        try:
            instance = await self.get_by_id(record_id)
            if not instance:
                logger.warning("删除失败：记录不存在",
                               operation_name="delete",
                               record_id=record_id,
                               model_name=self._model_name)
                return False

            await self.db.delete(instance)
            await self.db.commit()

            logger.info(log_messages.DB_UPDATE_SUCCESS,
                        operation_name="delete",
                        record_id=record_id,
                        model_name=self._model_name)

            return True

        except Exception as e:
            await self.db.rollback()
            logger.error(log_messages.DB_UPDATE_FAILED,
                         operation_name="delete",
                         record_id=record_id,
                         model_name=self._model_name,
                         exception=e)
            raise

    async def count(self, created_after: Optional[datetime] = None, **filters) -> int:
        """
        统计记录数量

        Args:
            created_after: 只统计该时间之后创建的记录（模型需有 created_at 字段）
            **filters: 字段等值过滤
        """
        try:
            query = select(func.count()).select_from(self.model)

            for key, value in filters.items():
                if hasattr(self.model, key):
                    query = query.filter(getattr(self.model, key) == value)

            if created_after is not None and hasattr(self.model, 'created_at'):
                query = query.filter(self.model.created_at >= created_after)

            result = await self.db.execute(query)
            return result.scalar() or 0

        except Exception as e:
            logger.error(log_messages.DB_QUERY_FAILED,
                         operation_name="count",
                         model_name=self._model_name,
                         exception=e)
            raise
