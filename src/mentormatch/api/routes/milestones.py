"""Milestone API routes.

Every mutation re-derives project progress inside the state machine, then
notifies the other party on a best-effort basis.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.api.routes.shared import load_project, present_project, user_name
from mentormatch.dependencies import CurrentActor, Registry, get_db
from mentormatch.events.notifications import emit_notification, push_event
from mentormatch.models.enums import MilestoneStatus, NotificationKind
from mentormatch.models.project import (
    MilestoneCreate,
    MilestoneEvaluate,
    MilestoneFileSubmit,
    MilestoneRef,
    MilestoneSubmit,
    Project,
)
from mentormatch.repositories.project_repo import ProjectRepository
from mentormatch.services import mentorship

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Milestones"])


def _progress_event(project: Project) -> dict:
    return {
        "project_id": project.project_id,
        "status": str(project.status),
        "progress": project.progress,
    }


async def _notify_milestone(
    db: AsyncSession,
    registry,
    kind: NotificationKind,
    recipient_id: str | None,
    project: Project,
    milestone_id: str,
    **extra,
) -> None:
    if not recipient_id:
        return
    milestone = project.get_milestone(milestone_id)
    await emit_notification(
        kind,
        recipient_id,
        {
            "project_id": project.project_id,
            "project_title": project.title,
            "milestone_id": milestone_id,
            "milestone_title": milestone.title if milestone else None,
            "mentor_id": project.mentor_id,
            "mentor_name": await user_name(db, project.mentor_id),
            "student_name": await user_name(db, project.student_id),
            **extra,
        },
        db_session=db,
        registry=registry,
    )
    push_event(registry, recipient_id, "project_updated", _progress_event(project))


@router.post("/projects/add-milestone")
async def add_milestone(
    body: MilestoneCreate,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, body.project_id)
    mentorship.add_milestone(actor, project, body)
    await repo.save_domain(row, project)
    await db.commit()

    milestone = project.milestones[-1]
    logger.info("Milestone %s added to project %s", milestone.milestone_id, project.project_id)
    await _notify_milestone(
        db, registry, NotificationKind.MILESTONE_ADDED, project.student_id, project, milestone.milestone_id
    )
    return await present_project(db, project)


async def _submit(db: AsyncSession, registry, actor, project_id: str, milestone_id: str, content) -> Project:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, project_id)
    mentorship.submit_milestone(actor, project, milestone_id, content)
    await repo.save_domain(row, project)
    await db.commit()

    await _notify_milestone(
        db, registry, NotificationKind.MILESTONE_SUBMITTED, project.mentor_id, project, milestone_id
    )
    return project


@router.post("/projects/submit-milestone")
async def submit_milestone(
    body: MilestoneSubmit,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    project = await _submit(db, registry, actor, body.project_id, body.milestone_id, body.submission)
    return await present_project(db, project)


@router.post("/projects/submit-milestone-file")
async def submit_milestone_file(
    body: MilestoneFileSubmit,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Submit a file reference produced by the upload service."""
    project = await _submit(db, registry, actor, body.project_id, body.milestone_id, body.file_url)
    return {"project": await present_project(db, project), "file_url": body.file_url}


@router.post("/projects/cancel-submission")
async def cancel_submission(
    body: MilestoneRef,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, body.project_id)
    mentorship.cancel_submission(actor, project, body.milestone_id)
    await repo.save_domain(row, project)
    await db.commit()

    if project.mentor_id:
        push_event(registry, project.mentor_id, "project_updated", _progress_event(project))
    return await present_project(db, project)


@router.post("/projects/evaluate-milestone")
async def evaluate_milestone(
    body: MilestoneEvaluate,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = ProjectRepository(db)
    row, project = await load_project(repo, body.project_id)
    mentorship.evaluate_milestone(actor, project, body.milestone_id, body.status, body.feedback)
    await repo.save_domain(row, project)
    await db.commit()

    milestone = project.get_milestone(body.milestone_id)
    kind = (
        NotificationKind.MILESTONE_APPROVED
        if milestone.status == MilestoneStatus.COMPLETED
        else NotificationKind.MILESTONE_REJECTED
    )
    await _notify_milestone(
        db, registry, kind, project.student_id, project, body.milestone_id, feedback=milestone.feedback
    )
    return await present_project(db, project)
