"""
用户数据访问层
"""

from typing import List, Optional

from sqlalchemy import select, func

from app.models.user import User
from .base import BaseRepository


class UserRepository(BaseRepository):
    """用户Repository"""

    @property
    def model(self):
        return User

    async def get_by_email(self, email: str) -> Optional[User]:
        """根据邮箱获取用户（不区分大小写）"""
        query = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.db.execute(query)
        return result.scalars().first()

    async def list_users(self, skip: int = 0, limit: int = 100) -> List[User]:
        """分页获取用户列表，按注册时间倒序"""
        query = select(User).order_by(User.created_at.desc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())
