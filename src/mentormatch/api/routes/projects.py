"""Project lifecycle API routes."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.api.routes.shared import ensure_can_view, load_project, present_project, present_projects, user_name
from mentormatch.dependencies import CurrentActor, MentorActor, Registry, StudentActor, get_db
from mentormatch.errors.exceptions import NotFoundError
from mentormatch.events.notifications import emit_notification
from mentormatch.models.enums import ACTIVE_PROJECT_STATUSES, NotificationKind, ProjectStatus, Role
from mentormatch.models.project import (
    CompleteMentorshipBody,
    MentorshipRequestBody,
    MentorStats,
    ProjectCreate,
    ProjectUpdate,
    RespondToRequestBody,
)
from mentormatch.repositories.project_repo import ProjectRepository, to_domain
from mentormatch.repositories.user_repo import UserRepository, to_profile
from mentormatch.services import mentorship

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Projects"])


async def _require_mentor_exists(db: AsyncSession, mentor_id: str) -> None:
    mentor = await UserRepository(db).get(mentor_id)
    if not mentor or mentor.role != Role.MENTOR:
        raise NotFoundError("Mentor", mentor_id)


async def _notify_request(db: AsyncSession, registry, project) -> None:
    await emit_notification(
        NotificationKind.MENTORSHIP_REQUESTED,
        project.mentor_id,
        {
            "project_id": project.project_id,
            "project_title": project.title,
            "student_name": await user_name(db, project.student_id),
            "mentor_id": project.mentor_id,
        },
        db_session=db,
        registry=registry,
    )


@router.post("/projects", status_code=201)
async def create_project(
    body: ProjectCreate,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    project = mentorship.create_project(actor, body)
    if project.mentor_id:
        await _require_mentor_exists(db, project.mentor_id)

    await ProjectRepository(db).add_domain(project)
    await db.commit()
    logger.info("Project %s created (status=%s)", project.project_id, project.status)

    if project.status == ProjectStatus.PENDING:
        await _notify_request(db, registry, project)
    return await present_project(db, project)


@router.get("/projects/student")
async def list_student_projects(actor: StudentActor, db: AsyncSession = Depends(get_db)) -> list[dict]:
    rows = await ProjectRepository(db).list_by_student(actor.user_id)
    return await present_projects(db, [to_domain(r) for r in rows])


@router.get("/projects/mentor/requests")
async def list_mentor_requests(actor: MentorActor, db: AsyncSession = Depends(get_db)) -> list[dict]:
    rows = await ProjectRepository(db).list_by_mentor(actor.user_id, [ProjectStatus.PENDING])
    return await present_projects(db, [to_domain(r) for r in rows])


@router.get("/projects/mentor/mentees")
async def list_mentor_mentees(actor: MentorActor, db: AsyncSession = Depends(get_db)) -> list[dict]:
    rows = await ProjectRepository(db).list_by_mentor(actor.user_id, ACTIVE_PROJECT_STATUSES)
    return await present_projects(db, [to_domain(r) for r in rows])


@router.get("/projects/mentor/stats", response_model=MentorStats)
async def mentor_stats(actor: MentorActor, db: AsyncSession = Depends(get_db)) -> MentorStats:
    repo = ProjectRepository(db)
    return MentorStats(
        active_mentees=await repo.count_by_mentor(actor.user_id, ACTIVE_PROJECT_STATUSES),
        pending_requests=await repo.count_by_mentor(actor.user_id, [ProjectStatus.PENDING]),
        completed_projects=await repo.count_by_mentor(actor.user_id, [ProjectStatus.COMPLETED]),
    )


@router.post("/projects/mentor/respond")
async def respond_to_request(
    body: RespondToRequestBody,
    actor: MentorActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, body.project_id)

    # Lock the mentor row before counting so concurrent approvals serialize
    mentor_row = await UserRepository(db).get_mentor_for_update(actor.user_id)
    if mentor_row is None:
        raise NotFoundError("Mentor", actor.user_id)
    mentor = to_profile(mentor_row)
    active = await repo.count_by_mentor(actor.user_id, ACTIVE_PROJECT_STATUSES)

    mentorship.respond_to_request(actor, project, body.status, mentor=mentor, active_mentees=active)
    await repo.save_domain(row, project)
    await db.commit()
    logger.info("Mentor %s %s project %s", actor.user_id, project.status, project.project_id)

    kind = (
        NotificationKind.MENTORSHIP_APPROVED
        if project.status == ProjectStatus.APPROVED
        else NotificationKind.MENTORSHIP_REJECTED
    )
    await emit_notification(
        kind,
        project.student_id,
        {
            "project_id": project.project_id,
            "project_title": project.title,
            "mentor_id": mentor.user_id,
            "mentor_name": mentor.name,
        },
        db_session=db,
        registry=registry,
    )
    return await present_project(db, project)


@router.post("/projects/mentor/complete")
async def complete_mentorship(
    body: CompleteMentorshipBody,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, body.project_id)
    mentorship.complete_mentorship(actor, project)
    await repo.save_domain(row, project)
    await db.commit()

    await emit_notification(
        NotificationKind.MENTORSHIP_COMPLETED,
        project.student_id,
        {
            "project_id": project.project_id,
            "project_title": project.title,
            "mentor_id": actor.user_id,
            "mentor_name": await user_name(db, actor.user_id),
        },
        db_session=db,
        registry=registry,
    )
    return await present_project(db, project)


@router.post("/projects/{project_id}/request-mentorship")
async def request_mentorship(
    project_id: str,
    body: MentorshipRequestBody,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, project_id)
    mentorship.request_mentorship(actor, project, body.mentor_id)
    await _require_mentor_exists(db, project.mentor_id)
    await repo.save_domain(row, project)
    await db.commit()

    await _notify_request(db, registry, project)
    return await present_project(db, project)


@router.get("/projects/{project_id}")
async def get_project(
    project_id: str,
    actor: CurrentActor,
    db: AsyncSession = Depends(get_db),
) -> dict:
    _, project = await load_project(ProjectRepository(db), project_id)
    ensure_can_view(actor, project)
    return await present_project(db, project)


@router.put("/projects/{project_id}")
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, project_id)
    previous = (project.status, project.mentor_id)

    mentorship.update_project(actor, project, body)
    requested = project.status == ProjectStatus.PENDING and (project.status, project.mentor_id) != previous
    if requested:
        await _require_mentor_exists(db, project.mentor_id)
    await repo.save_domain(row, project)
    await db.commit()

    if requested:
        await _notify_request(db, registry, project)
    return await present_project(db, project)


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: str,
    actor: CurrentActor,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, project_id)
    mentorship.ensure_can_delete(actor, project)
    await repo.delete(row)
    await db.commit()
    logger.info("Project %s deleted by %s", project_id, actor.user_id)
    return {"message": "Project deleted successfully", "project_id": project_id}
