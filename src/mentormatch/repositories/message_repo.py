"""Message repository."""

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.db.models.message import MessageRow
from mentormatch.repositories.base import BaseRepository


def _between(user_a: str, user_b: str):
    return or_(
        and_(MessageRow.sender_id == user_a, MessageRow.receiver_id == user_b),
        and_(MessageRow.sender_id == user_b, MessageRow.receiver_id == user_a),
    )


class MessageRepository(BaseRepository[MessageRow]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, MessageRow)

    async def list_conversation(self, user_id: str, other_user_id: str) -> list[MessageRow]:
        stmt = (
            select(MessageRow)
            .where(_between(user_id, other_user_id))
            .order_by(MessageRow.sent_at.asc(), MessageRow.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> list[MessageRow]:
        """All messages the user sent or received, newest first."""
        stmt = (
            select(MessageRow)
            .where(or_(MessageRow.sender_id == user_id, MessageRow.receiver_id == user_id))
            .order_by(MessageRow.sent_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_unread(self, sender_id: str, receiver_id: str) -> int:
        stmt = select(func.count()).select_from(MessageRow).where(
            MessageRow.sender_id == sender_id,
            MessageRow.receiver_id == receiver_id,
            MessageRow.read.is_(False),
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def mark_read(self, sender_id: str, receiver_id: str) -> int:
        stmt = (
            update(MessageRow)
            .where(
                MessageRow.sender_id == sender_id,
                MessageRow.receiver_id == receiver_id,
                MessageRow.read.is_(False),
            )
            .values(read=True)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
