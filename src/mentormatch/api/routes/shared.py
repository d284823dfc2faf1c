"""Helpers shared by the project, milestone and suggestion routes."""

from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.db.models.project import ProjectRow
from mentormatch.db.models.user import UserRow
from mentormatch.errors.exceptions import AuthorizationError, NotFoundError
from mentormatch.models.enums import Role
from mentormatch.models.project import Project
from mentormatch.models.user import Actor
from mentormatch.repositories.project_repo import ProjectRepository, to_domain
from mentormatch.repositories.user_repo import UserRepository


async def load_project(repo: ProjectRepository, project_id: str) -> tuple[ProjectRow, Project]:
    row = await repo.get(project_id)
    if not row:
        raise NotFoundError("Project", project_id)
    return row, to_domain(row)


def ensure_can_view(actor: Actor, project: Project) -> None:
    """Only the owning student and the addressed mentor may read a project."""
    if actor.role == Role.STUDENT and project.student_id == actor.user_id:
        return
    if actor.role == Role.MENTOR and project.mentor_id == actor.user_id:
        return
    raise AuthorizationError("Not authorized to view this project")


def _user_brief(row: UserRow | None) -> dict | None:
    if row is None:
        return None
    brief = {"user_id": row.user_id, "name": row.name, "email": row.email}
    if row.role == Role.STUDENT:
        brief.update(usn=row.usn, domain=row.domain, specialization=row.specialization)
    return brief


async def present_projects(db: AsyncSession, projects: list[Project]) -> list[dict]:
    """Serialize projects with the student and mentor they reference."""
    user_ids = {p.student_id for p in projects} | {p.mentor_id for p in projects if p.mentor_id}
    users = {u.user_id: u for u in await UserRepository(db).list_by_ids(sorted(user_ids))}
    return [
        {
            **p.model_dump(mode="json"),
            "student": _user_brief(users.get(p.student_id)),
            "mentor": _user_brief(users.get(p.mentor_id)) if p.mentor_id else None,
        }
        for p in projects
    ]


async def present_project(db: AsyncSession, project: Project) -> dict:
    return (await present_projects(db, [project]))[0]


async def user_name(db: AsyncSession, user_id: str | None) -> str | None:
    if not user_id:
        return None
    row = await UserRepository(db).get(user_id)
    return row.name if row else None
