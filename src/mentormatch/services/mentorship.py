"""Mentorship state machine.

Governs project and milestone status transitions together with the ownership,
role and capacity guards around them. Every operation takes the acting
identity and a fully loaded ``Project``, mutates it in place and returns it;
persisting the result is the caller's job. Guard violations raise the
``mentormatch.errors.exceptions`` taxonomy and never degrade to no-ops.

Project states::

    draft ──► pending ──► approved ──► in_progress ──► completed
                 │  ▲         └──────────────────────────►┘
                 ▼  │
              rejected
"""

from datetime import date, datetime, timezone

from mentormatch.errors.exceptions import (
    AuthorizationError,
    CapacityExceededError,
    ConflictError,
    InvalidStatusError,
    NotFoundError,
    ValidationError,
)
from mentormatch.models.enums import (
    ACTIVE_PROJECT_STATUSES,
    MilestoneStatus,
    ProjectStatus,
    RequestDecision,
    Role,
)
from mentormatch.models.project import (
    Milestone,
    MilestoneCreate,
    Project,
    ProjectCreate,
    ProjectUpdate,
    TITLE_MAX_LENGTH,
)
from mentormatch.models.user import Actor, MentorProfile
from mentormatch.services.id_generator import generate_id
from mentormatch.services.matching.keywords import normalize_keyword_input
from mentormatch.services.progress import recompute_progress

# Statuses from which a student may (re)request a mentor
REQUESTABLE_STATUSES = (ProjectStatus.DRAFT, ProjectStatus.PENDING, ProjectStatus.REJECTED)

# Values a mentor may assign when evaluating a milestone
EVALUATION_STATUSES = (MilestoneStatus.COMPLETED, MilestoneStatus.PENDING)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ── Guards ─────────────────────────────────────────────────────────────────────

def _require_role(actor: Actor, role: Role, action: str) -> None:
    if actor.role != role:
        raise AuthorizationError(f"Only {role}s can {action}")


def _require_owner(actor: Actor, project: Project, action: str) -> None:
    _require_role(actor, Role.STUDENT, action)
    if project.student_id != actor.user_id:
        raise AuthorizationError("Not authorized: project belongs to another student")


def _require_assigned_mentor(actor: Actor, project: Project, action: str) -> None:
    _require_role(actor, Role.MENTOR, action)
    if not project.mentor_id or project.mentor_id != actor.user_id:
        raise AuthorizationError("Not authorized: you are not the mentor of this project")


def _check_title_length(title: str, label: str) -> None:
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"{label} must be at most {TITLE_MAX_LENGTH} characters",
            {"max_length": TITLE_MAX_LENGTH},
        )


def _find_milestone(project: Project, milestone_id: str) -> Milestone:
    milestone = project.get_milestone(milestone_id)
    if milestone is None:
        raise NotFoundError("Milestone", milestone_id)
    return milestone


def parse_due_date(value: str | date | None) -> date | None:
    """Accept ``YYYY-MM-DD``, ``DD-MM-YYYY`` (``/`` also allowed) or ISO datetimes."""
    if value is None or isinstance(value, date):
        return value
    raw = value.strip()
    if not raw:
        return None
    parts = raw.replace("/", "-").split("-")
    try:
        if len(parts) == 3 and all(p.isdigit() for p in parts):
            if len(parts[0]) == 4:
                return date(int(parts[0]), int(parts[1]), int(parts[2]))
            return date(int(parts[2]), int(parts[1]), int(parts[0]))
        return datetime.fromisoformat(raw).date()
    except ValueError as exc:
        raise ValidationError("Invalid due date format", {"due_date": value}) from exc


# ── Project lifecycle ──────────────────────────────────────────────────────────

def create_project(actor: Actor, data: ProjectCreate, *, now: datetime | None = None) -> Project:
    """Create a draft, or a pending request when a mentor is pre-selected."""
    _require_role(actor, Role.STUDENT, "create projects")
    title, idea = _clean(data.title), _clean(data.idea)
    if not title or not idea:
        raise ValidationError("Title and idea are required")
    _check_title_length(title, "Title")

    now = now or _utcnow()
    mentor_id = _clean(data.mentor_id)
    return Project(
        project_id=generate_id("proj_"),
        student_id=actor.user_id,
        mentor_id=mentor_id,
        title=title,
        idea=idea,
        guidance_needed=_clean(data.guidance_needed),
        keywords=normalize_keyword_input(data.keywords),
        status=ProjectStatus.PENDING if mentor_id else ProjectStatus.DRAFT,
        progress=0,
        milestones=[],
        created_at=now,
        updated_at=now,
    )


def request_mentorship(
    actor: Actor,
    project: Project,
    mentor_id: str,
    *,
    now: datetime | None = None,
) -> Project:
    """Send (or re-send) a project to a mentor for approval."""
    _require_owner(actor, project, "request mentorship")
    mentor_id = _clean(mentor_id)
    if not mentor_id:
        raise ValidationError("A mentor id is required to request mentorship")
    if project.status not in REQUESTABLE_STATUSES:
        raise InvalidStatusError(
            f"Cannot request mentorship for a project that is '{project.status}'",
            {"status": project.status},
        )
    project.mentor_id = mentor_id
    project.status = ProjectStatus.PENDING
    project.updated_at = now or _utcnow()
    return project


def respond_to_request(
    actor: Actor,
    project: Project,
    decision: str,
    *,
    mentor: MentorProfile,
    active_mentees: int,
    now: datetime | None = None,
) -> Project:
    """Approve or reject a mentorship request.

    Only a pending request addressed to the acting mentor can be answered.
    ``active_mentees`` is the number of the mentor's projects currently
    approved or in progress; approval needs it to stay below
    ``mentor.max_students``.
    """
    _require_role(actor, Role.MENTOR, "respond to mentorship requests")
    if mentor.user_id != actor.user_id:
        raise AuthorizationError("Mentor profile does not match the acting mentor")
    try:
        decision = RequestDecision(decision)
    except ValueError:
        raise InvalidStatusError(
            "Invalid status",
            {"status": decision, "allowed": [d.value for d in RequestDecision]},
        ) from None
    if project.mentor_id != actor.user_id:
        raise AuthorizationError("Not authorized: this request is not addressed to you")
    if project.status != ProjectStatus.PENDING:
        raise InvalidStatusError(
            f"Cannot respond to a project that is '{project.status}'",
            {"status": project.status},
        )

    if decision == RequestDecision.APPROVED:
        if active_mentees >= mentor.max_students:
            raise CapacityExceededError(mentor.max_students)
        project.status = ProjectStatus.APPROVED
        project.mentor_id = actor.user_id
    else:
        project.status = ProjectStatus.REJECTED

    project.updated_at = now or _utcnow()
    return project


def complete_mentorship(actor: Actor, project: Project, *, now: datetime | None = None) -> Project:
    """Mentor ends the engagement; progress is forced to 100."""
    _require_assigned_mentor(actor, project, "complete mentorships")
    if project.status not in ACTIVE_PROJECT_STATUSES:
        raise InvalidStatusError(
            f"Cannot complete a project that is '{project.status}'",
            {"status": project.status},
        )
    project.status = ProjectStatus.COMPLETED
    project.progress = 100
    project.updated_at = now or _utcnow()
    return project


def update_project(
    actor: Actor,
    project: Project,
    changes: ProjectUpdate,
    *,
    now: datetime | None = None,
) -> Project:
    """Edit the student's own project fields.

    A ``mentor_id`` naming a new mentor, or supplied while the project is a
    draft or rejected, is handled as ``request_mentorship``.
    """
    _require_owner(actor, project, "update projects")
    now = now or _utcnow()
    fields = changes.model_fields_set

    if "title" in fields:
        title = _clean(changes.title)
        if not title:
            raise ValidationError("Title cannot be empty")
        _check_title_length(title, "Title")
        project.title = title
    if "idea" in fields:
        idea = _clean(changes.idea)
        if not idea:
            raise ValidationError("Idea cannot be empty")
        project.idea = idea
    if "guidance_needed" in fields:
        project.guidance_needed = _clean(changes.guidance_needed)
    if "keywords" in fields:
        project.keywords = normalize_keyword_input(changes.keywords)

    mentor_id = _clean(changes.mentor_id)
    if mentor_id and (
        mentor_id != project.mentor_id
        or project.status in (ProjectStatus.DRAFT, ProjectStatus.REJECTED)
    ):
        request_mentorship(actor, project, mentor_id, now=now)

    project.updated_at = now
    return project


def ensure_can_delete(actor: Actor, project: Project) -> None:
    _require_owner(actor, project, "delete projects")


# ── Milestones ─────────────────────────────────────────────────────────────────

def add_milestone(
    actor: Actor,
    project: Project,
    data: MilestoneCreate,
    *,
    now: datetime | None = None,
) -> Project:
    """Append a pending milestone."""
    _require_assigned_mentor(actor, project, "add milestones")
    title = _clean(data.title)
    if not title:
        raise ValidationError("Milestone title is required")
    _check_title_length(title, "Milestone title")

    now = now or _utcnow()
    milestone = Milestone(
        milestone_id=generate_id("ms_"),
        title=title,
        description=_clean(data.description),
        due_date=parse_due_date(data.due_date),
        status=MilestoneStatus.PENDING,
        updated_at=now,
    )
    project.milestones.append(milestone)
    project.updated_at = now
    return recompute_progress(project)


def submit_milestone(
    actor: Actor,
    project: Project,
    milestone_id: str,
    submission: str | None,
    *,
    now: datetime | None = None,
) -> Project:
    """Record a submission; inline text and file references are interchangeable."""
    _require_owner(actor, project, "submit milestones")
    milestone = _find_milestone(project, milestone_id)
    content = _clean(submission)
    if not content:
        raise ValidationError("Submission content is required")

    now = now or _utcnow()
    milestone.submission = content
    milestone.status = MilestoneStatus.SUBMITTED
    milestone.updated_at = now
    project.updated_at = now
    return recompute_progress(project)


def cancel_submission(
    actor: Actor,
    project: Project,
    milestone_id: str,
    *,
    now: datetime | None = None,
) -> Project:
    _require_owner(actor, project, "cancel submissions")
    milestone = _find_milestone(project, milestone_id)
    if milestone.status == MilestoneStatus.COMPLETED:
        raise ConflictError("Cannot cancel a completed milestone")

    now = now or _utcnow()
    milestone.submission = None
    milestone.status = MilestoneStatus.PENDING
    milestone.updated_at = now
    project.updated_at = now
    return recompute_progress(project)


def evaluate_milestone(
    actor: Actor,
    project: Project,
    milestone_id: str,
    status: str,
    feedback: str | None = None,
    *,
    now: datetime | None = None,
) -> Project:
    """Accept a milestone (``completed``) or send it back (``pending``)."""
    _require_assigned_mentor(actor, project, "evaluate milestones")
    milestone = _find_milestone(project, milestone_id)
    try:
        new_status = MilestoneStatus(status)
    except ValueError:
        new_status = None
    if new_status not in EVALUATION_STATUSES:
        raise InvalidStatusError(
            "Invalid milestone status",
            {"status": status, "allowed": [s.value for s in EVALUATION_STATUSES]},
        )

    now = now or _utcnow()
    milestone.status = new_status
    milestone.feedback = _clean(feedback)
    milestone.updated_at = now
    project.updated_at = now
    return recompute_progress(project)
