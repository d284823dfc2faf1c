"""Project repository."""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.db.models.project import ProjectRow
from mentormatch.models.project import Project
from mentormatch.repositories.base import BaseRepository


def to_domain(row: ProjectRow) -> Project:
    return Project.model_validate(
        {
            "project_id": row.project_id,
            "student_id": row.student_id,
            "mentor_id": row.mentor_id,
            "title": row.title,
            "idea": row.idea,
            "guidance_needed": row.guidance_needed,
            "keywords": list(row.keywords or []),
            "status": row.status,
            "progress": row.progress,
            "milestones": list(row.milestones or []),
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def _row_values(project: Project) -> dict:
    data = project.model_dump(mode="json")
    return {
        "student_id": project.student_id,
        "mentor_id": project.mentor_id,
        "title": project.title,
        "idea": project.idea,
        "guidance_needed": project.guidance_needed,
        "keywords": list(project.keywords),
        "status": str(project.status),
        "progress": project.progress,
        "milestones": data["milestones"],
    }


class ProjectRepository(BaseRepository[ProjectRow]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, ProjectRow)

    async def get(self, project_id: str) -> ProjectRow | None:
        return await self.get_by_id("project_id", project_id)

    async def add_domain(self, project: Project) -> ProjectRow:
        return await self.create(
            project_id=project.project_id,
            created_at=project.created_at,
            updated_at=project.updated_at,
            **_row_values(project),
        )

    async def save_domain(self, row: ProjectRow, project: Project) -> ProjectRow:
        """Write a mutated domain project back onto its row."""
        return await self.update(row, updated_at=project.updated_at, **_row_values(project))

    async def list_by_student(self, student_id: str) -> list[ProjectRow]:
        stmt = (
            select(ProjectRow)
            .where(ProjectRow.student_id == student_id)
            .order_by(ProjectRow.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_mentor(self, mentor_id: str, statuses: Iterable[str]) -> list[ProjectRow]:
        stmt = (
            select(ProjectRow)
            .where(
                ProjectRow.mentor_id == mentor_id,
                ProjectRow.status.in_([str(s) for s in statuses]),
            )
            .order_by(ProjectRow.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_mentor(self, mentor_id: str, statuses: Iterable[str]) -> int:
        stmt = select(func.count()).select_from(ProjectRow).where(
            ProjectRow.mentor_id == mentor_id,
            ProjectRow.status.in_([str(s) for s in statuses]),
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
