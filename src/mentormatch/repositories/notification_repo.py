"""Notification repository."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.db.models.notification import NotificationRow
from mentormatch.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[NotificationRow]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, NotificationRow)

    async def get(self, notification_id: str) -> NotificationRow | None:
        return await self.get_by_id("notification_id", notification_id)

    async def list_for_recipient(
        self,
        recipient_id: str,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[NotificationRow]:
        stmt = select(NotificationRow).where(NotificationRow.recipient_id == recipient_id)
        if unread_only:
            stmt = stmt.where(NotificationRow.read.is_(False))
        stmt = stmt.order_by(NotificationRow.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_all_read(self, recipient_id: str) -> int:
        stmt = (
            update(NotificationRow)
            .where(
                NotificationRow.recipient_id == recipient_id,
                NotificationRow.read.is_(False),
            )
            .values(read=True)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
