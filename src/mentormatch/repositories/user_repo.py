"""Repository for user records."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.config import settings
from mentormatch.db.models.user import UserRow
from mentormatch.models.enums import Role
from mentormatch.models.user import MentorProfile, StudentProfile
from mentormatch.repositories.base import BaseRepository


def to_profile(row: UserRow) -> StudentProfile | MentorProfile:
    """Narrow a user row to its role-specific profile."""
    if row.role == Role.MENTOR:
        return MentorProfile(
            user_id=row.user_id,
            email=row.email,
            name=row.name,
            created_at=row.created_at,
            max_students=row.max_students or settings.default_max_students,
            summary=row.summary,
            short_description=row.short_description,
            projects_done=row.projects_done,
            expertise=list(row.expertise or []),
        )
    return StudentProfile(
        user_id=row.user_id,
        email=row.email,
        name=row.name,
        created_at=row.created_at,
        usn=row.usn or "",
        domain=row.domain or "",
        specialization=row.specialization,
        year=row.year,
    )


class UserRepository(BaseRepository[UserRow]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, UserRow)

    async def get(self, user_id: str) -> UserRow | None:
        return await self.get_by_id("user_id", user_id)

    async def get_by_email(self, email: str) -> UserRow | None:
        stmt = select(UserRow).where(func.lower(UserRow.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_usn(self, usn: str) -> UserRow | None:
        stmt = select(UserRow).where(UserRow.usn == usn)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_ids(self, user_ids: list[str]) -> list[UserRow]:
        if not user_ids:
            return []
        stmt = select(UserRow).where(UserRow.user_id.in_(user_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_mentors(self) -> list[UserRow]:
        stmt = (
            select(UserRow)
            .where(UserRow.role == Role.MENTOR, UserRow.is_active.is_(True))
            .order_by(UserRow.created_at, UserRow.user_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_mentor_for_update(self, user_id: str) -> UserRow | None:
        """Load a mentor row with a row lock held until the transaction ends.

        Serializes concurrent approvals against the same mentor's intake limit.
        """
        stmt = (
            select(UserRow)
            .where(UserRow.user_id == user_id, UserRow.role == Role.MENTOR)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
