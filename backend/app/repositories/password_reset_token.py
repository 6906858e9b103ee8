"""
密码重置令牌数据访问层
"""

from typing import Optional

from sqlalchemy import select, update

from app.models.password_reset_token import PasswordResetToken
from .base import BaseRepository


class PasswordResetTokenRepository(BaseRepository):
    """密码重置令牌Repository"""

    @property
    def model(self):
        return PasswordResetToken

    async def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        query = select(PasswordResetToken).where(PasswordResetToken.token == token)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def invalidate_for_user(self, user_id: str) -> None:
        """作废用户所有未使用的令牌"""
        await self.db.execute(
            update(PasswordResetToken)
            .where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.used.is_(False)
            )
            .values(used=True)
        )
        await self.db.commit()
