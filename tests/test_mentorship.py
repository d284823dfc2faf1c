"""Tests for the mentorship state machine, independent of HTTP and storage."""

from datetime import date, datetime, timezone

import pytest

from mentormatch.errors.exceptions import (
    AuthorizationError,
    CapacityExceededError,
    ConflictError,
    InvalidStatusError,
    NotFoundError,
    ValidationError,
)
from mentormatch.models.enums import MilestoneStatus, ProjectStatus, Role
from mentormatch.models.project import MilestoneCreate, Project, ProjectCreate, ProjectUpdate
from mentormatch.models.user import Actor, MentorProfile
from mentormatch.services import mentorship

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

STUDENT = Actor(user_id="usr_student", role=Role.STUDENT)
OTHER_STUDENT = Actor(user_id="usr_other", role=Role.STUDENT)
MENTOR = Actor(user_id="usr_mentor", role=Role.MENTOR)
OTHER_MENTOR = Actor(user_id="usr_mentor2", role=Role.MENTOR)


def _mentor_profile(actor: Actor = MENTOR, max_students: int = 2) -> MentorProfile:
    return MentorProfile(
        user_id=actor.user_id,
        email=f"{actor.user_id}@example.edu",
        name="Dr. Mentor",
        max_students=max_students,
    )


def _project(status: ProjectStatus = ProjectStatus.PENDING, mentor_id: str | None = MENTOR.user_id) -> Project:
    return Project(
        project_id="proj_1",
        student_id=STUDENT.user_id,
        mentor_id=mentor_id,
        title="Crop disease detection",
        idea="Leaf photo classifier",
        status=status,
    )


def _with_milestone(status: MilestoneStatus = MilestoneStatus.PENDING) -> Project:
    project = _project(ProjectStatus.APPROVED)
    mentorship.add_milestone(MENTOR, project, MilestoneCreate(project_id="proj_1", title="Dataset"), now=NOW)
    project.milestones[0].status = status
    return project


# ── create / request ───────────────────────────────────────────────────────────

def test_create_without_mentor_is_draft():
    project = mentorship.create_project(
        STUDENT, ProjectCreate(title=" Title ", idea="Idea", keywords="ML, Python"), now=NOW
    )
    assert project.status == ProjectStatus.DRAFT
    assert project.title == "Title"
    assert project.keywords == ["ml", "python"]
    assert project.progress == 0
    assert project.project_id.startswith("proj_")


def test_create_with_mentor_is_pending():
    project = mentorship.create_project(
        STUDENT, ProjectCreate(title="T", idea="I", mentor_id=MENTOR.user_id), now=NOW
    )
    assert project.status == ProjectStatus.PENDING
    assert project.mentor_id == MENTOR.user_id


@pytest.mark.parametrize("title, idea", [("", "idea"), ("title", "   "), (None, None)])
def test_create_requires_title_and_idea(title, idea):
    with pytest.raises(ValidationError):
        mentorship.create_project(STUDENT, ProjectCreate(title=title, idea=idea))


def test_create_rejects_overlong_title():
    with pytest.raises(ValidationError) as exc_info:
        mentorship.create_project(STUDENT, ProjectCreate(title="x" * 301, idea="I"))
    assert exc_info.value.details == {"max_length": 300}


def test_create_accepts_title_at_limit():
    project = mentorship.create_project(STUDENT, ProjectCreate(title="x" * 300, idea="I"))
    assert len(project.title) == 300


def test_mentor_cannot_create_project():
    with pytest.raises(AuthorizationError):
        mentorship.create_project(MENTOR, ProjectCreate(title="T", idea="I"))


def test_request_after_rejection():
    project = _project(ProjectStatus.REJECTED)
    mentorship.request_mentorship(STUDENT, project, OTHER_MENTOR.user_id, now=NOW)
    assert project.status == ProjectStatus.PENDING
    assert project.mentor_id == OTHER_MENTOR.user_id


def test_request_not_allowed_once_approved():
    with pytest.raises(InvalidStatusError):
        mentorship.request_mentorship(STUDENT, _project(ProjectStatus.APPROVED), OTHER_MENTOR.user_id)


def test_request_by_other_student():
    with pytest.raises(AuthorizationError):
        mentorship.request_mentorship(OTHER_STUDENT, _project(ProjectStatus.DRAFT, None), MENTOR.user_id)


# ── respond ────────────────────────────────────────────────────────────────────

def test_approve_assigns_mentor():
    project = mentorship.respond_to_request(
        MENTOR, _project(), "approved", mentor=_mentor_profile(), active_mentees=0, now=NOW
    )
    assert project.status == ProjectStatus.APPROVED
    assert project.mentor_id == MENTOR.user_id


def test_reject_keeps_mentor_reference():
    project = mentorship.respond_to_request(
        MENTOR, _project(), "rejected", mentor=_mentor_profile(), active_mentees=0
    )
    assert project.status == ProjectStatus.REJECTED
    assert project.mentor_id == MENTOR.user_id


def test_approve_at_capacity_fails_and_leaves_project_pending():
    project = _project()
    with pytest.raises(CapacityExceededError) as exc_info:
        mentorship.respond_to_request(
            MENTOR, project, "approved", mentor=_mentor_profile(max_students=2), active_mentees=2
        )
    assert exc_info.value.details == {"max_students": 2}
    assert "2" in exc_info.value.message
    assert project.status == ProjectStatus.PENDING


def test_reject_at_capacity_is_allowed():
    project = mentorship.respond_to_request(
        MENTOR, _project(), "rejected", mentor=_mentor_profile(max_students=1), active_mentees=5
    )
    assert project.status == ProjectStatus.REJECTED


def test_invalid_decision():
    with pytest.raises(InvalidStatusError):
        mentorship.respond_to_request(
            MENTOR, _project(), "maybe", mentor=_mentor_profile(), active_mentees=0
        )


def test_student_cannot_respond():
    with pytest.raises(AuthorizationError):
        mentorship.respond_to_request(
            STUDENT, _project(), "approved", mentor=_mentor_profile(), active_mentees=0
        )


def test_request_for_another_mentor():
    with pytest.raises(AuthorizationError):
        mentorship.respond_to_request(
            OTHER_MENTOR,
            _project(),
            "approved",
            mentor=_mentor_profile(OTHER_MENTOR),
            active_mentees=0,
        )


def test_unaddressed_draft_cannot_be_answered():
    project = _project(ProjectStatus.DRAFT, mentor_id=None)
    with pytest.raises(AuthorizationError):
        mentorship.respond_to_request(
            MENTOR, project, "approved", mentor=_mentor_profile(), active_mentees=0
        )
    assert project.status == ProjectStatus.DRAFT
    assert project.mentor_id is None


@pytest.mark.parametrize(
    "status",
    [ProjectStatus.APPROVED, ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED, ProjectStatus.REJECTED],
)
@pytest.mark.parametrize("decision", ["approved", "rejected"])
def test_only_pending_requests_can_be_answered(status, decision):
    project = _project(status)
    with pytest.raises(InvalidStatusError):
        mentorship.respond_to_request(
            MENTOR, project, decision, mentor=_mentor_profile(), active_mentees=0
        )
    assert project.status == status


def test_completed_project_keeps_full_progress_when_rejected():
    project = mentorship.complete_mentorship(MENTOR, _project(ProjectStatus.APPROVED))
    with pytest.raises(InvalidStatusError):
        mentorship.respond_to_request(
            MENTOR, project, "rejected", mentor=_mentor_profile(), active_mentees=0
        )
    assert project.status == ProjectStatus.COMPLETED
    assert project.progress == 100


# ── complete / update / delete ─────────────────────────────────────────────────

def test_complete_mentorship_forces_full_progress():
    project = mentorship.complete_mentorship(MENTOR, _project(ProjectStatus.IN_PROGRESS))
    assert project.status == ProjectStatus.COMPLETED
    assert project.progress == 100


def test_complete_pending_project_is_invalid():
    with pytest.raises(InvalidStatusError):
        mentorship.complete_mentorship(MENTOR, _project(ProjectStatus.PENDING))


def test_complete_by_unassigned_mentor():
    with pytest.raises(AuthorizationError):
        mentorship.complete_mentorship(OTHER_MENTOR, _project(ProjectStatus.APPROVED))


def test_update_fields_only_touches_supplied_fields():
    project = _project(ProjectStatus.DRAFT, None)
    project.guidance_needed = "Deployment"
    mentorship.update_project(STUDENT, project, ProjectUpdate(title="New title"))
    assert project.title == "New title"
    assert project.guidance_needed == "Deployment"
    assert project.status == ProjectStatus.DRAFT


def test_update_blank_title_rejected():
    with pytest.raises(ValidationError):
        mentorship.update_project(STUDENT, _project(ProjectStatus.DRAFT, None), ProjectUpdate(title=" "))


def test_update_overlong_title_rejected():
    project = _project(ProjectStatus.DRAFT, None)
    with pytest.raises(ValidationError):
        mentorship.update_project(STUDENT, project, ProjectUpdate(title="x" * 301))
    assert project.title == "Crop disease detection"


def test_update_with_mentor_requests_mentorship():
    project = _project(ProjectStatus.REJECTED)
    mentorship.update_project(STUDENT, project, ProjectUpdate(mentor_id=MENTOR.user_id))
    assert project.status == ProjectStatus.PENDING


def test_update_with_same_mentor_while_approved_keeps_status():
    project = _project(ProjectStatus.APPROVED)
    mentorship.update_project(STUDENT, project, ProjectUpdate(mentor_id=MENTOR.user_id, idea="Better idea"))
    assert project.status == ProjectStatus.APPROVED
    assert project.idea == "Better idea"


def test_update_with_new_mentor_while_approved_is_invalid():
    with pytest.raises(InvalidStatusError):
        mentorship.update_project(
            STUDENT, _project(ProjectStatus.APPROVED), ProjectUpdate(mentor_id=OTHER_MENTOR.user_id)
        )


def test_only_owner_can_delete():
    mentorship.ensure_can_delete(STUDENT, _project())
    with pytest.raises(AuthorizationError):
        mentorship.ensure_can_delete(OTHER_STUDENT, _project())
    with pytest.raises(AuthorizationError):
        mentorship.ensure_can_delete(MENTOR, _project())


# ── milestones ─────────────────────────────────────────────────────────────────

def test_add_milestone_parses_due_date():
    project = _project(ProjectStatus.APPROVED)
    mentorship.add_milestone(
        MENTOR,
        project,
        MilestoneCreate(project_id="proj_1", title="Dataset", due_date="15-04-2026"),
        now=NOW,
    )
    milestone = project.milestones[0]
    assert milestone.due_date == date(2026, 4, 15)
    assert milestone.status == MilestoneStatus.PENDING
    assert milestone.milestone_id.startswith("ms_")
    assert project.progress == 0
    assert project.status == ProjectStatus.APPROVED


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2026-04-15", date(2026, 4, 15)),
        ("15/04/2026", date(2026, 4, 15)),
        ("2026-04-15T10:00:00", date(2026, 4, 15)),
        ("", None),
        (None, None),
    ],
)
def test_parse_due_date(raw, expected):
    assert mentorship.parse_due_date(raw) == expected


def test_parse_due_date_rejects_garbage():
    with pytest.raises(ValidationError):
        mentorship.parse_due_date("next friday")


def test_add_milestone_requires_title():
    with pytest.raises(ValidationError):
        mentorship.add_milestone(MENTOR, _project(ProjectStatus.APPROVED), MilestoneCreate(project_id="proj_1"))


def test_add_milestone_rejects_overlong_title():
    project = _project(ProjectStatus.APPROVED)
    with pytest.raises(ValidationError) as exc_info:
        mentorship.add_milestone(MENTOR, project, MilestoneCreate(project_id="proj_1", title="x" * 301))
    assert "300 characters" in exc_info.value.message
    assert project.milestones == []


def test_student_cannot_add_milestone():
    with pytest.raises(AuthorizationError):
        mentorship.add_milestone(
            STUDENT, _project(ProjectStatus.APPROVED), MilestoneCreate(project_id="proj_1", title="x")
        )


def test_submit_moves_project_in_progress():
    project = _with_milestone()
    milestone_id = project.milestones[0].milestone_id
    mentorship.submit_milestone(STUDENT, project, milestone_id, "https://files/report.pdf")
    assert project.milestones[0].status == MilestoneStatus.SUBMITTED
    assert project.milestones[0].submission == "https://files/report.pdf"
    assert project.progress == 50
    assert project.status == ProjectStatus.IN_PROGRESS


def test_submit_requires_content():
    project = _with_milestone()
    with pytest.raises(ValidationError):
        mentorship.submit_milestone(STUDENT, project, project.milestones[0].milestone_id, "  ")


def test_submit_unknown_milestone():
    with pytest.raises(NotFoundError):
        mentorship.submit_milestone(STUDENT, _with_milestone(), "ms_missing", "text")


def test_cancel_completed_submission_conflicts():
    project = _with_milestone(MilestoneStatus.COMPLETED)
    before = project.milestones[0].model_copy()
    with pytest.raises(ConflictError):
        mentorship.cancel_submission(STUDENT, project, project.milestones[0].milestone_id)
    assert project.milestones[0] == before


def test_cancel_submission_resets_milestone():
    project = _with_milestone()
    milestone_id = project.milestones[0].milestone_id
    mentorship.submit_milestone(STUDENT, project, milestone_id, "draft report")
    mentorship.cancel_submission(STUDENT, project, milestone_id)
    assert project.milestones[0].status == MilestoneStatus.PENDING
    assert project.milestones[0].submission is None
    assert project.progress == 0


def test_evaluate_completes_project_when_all_done():
    project = _with_milestone(MilestoneStatus.SUBMITTED)
    mentorship.evaluate_milestone(MENTOR, project, project.milestones[0].milestone_id, "completed", " Nice ")
    assert project.milestones[0].feedback == "Nice"
    assert project.progress == 100
    assert project.status == ProjectStatus.COMPLETED


def test_evaluate_back_to_pending():
    project = _with_milestone(MilestoneStatus.SUBMITTED)
    mentorship.evaluate_milestone(MENTOR, project, project.milestones[0].milestone_id, "pending", "Redo")
    assert project.milestones[0].status == MilestoneStatus.PENDING
    assert project.progress == 0


@pytest.mark.parametrize("status", ["submitted", "rejected", "done"])
def test_evaluate_rejects_other_statuses(status):
    project = _with_milestone(MilestoneStatus.SUBMITTED)
    with pytest.raises(InvalidStatusError):
        mentorship.evaluate_milestone(MENTOR, project, project.milestones[0].milestone_id, status)
