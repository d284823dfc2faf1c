"""Pydantic models for projects, embedded milestones and request bodies."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from mentormatch.models.enums import MilestoneStatus, ProjectStatus

# Column width of project and milestone titles
TITLE_MAX_LENGTH = 300


class Milestone(BaseModel):
    """A mentor-defined deliverable, owned by exactly one project."""

    model_config = ConfigDict(extra="ignore")

    milestone_id: str
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    due_date: date | None = None
    status: MilestoneStatus = MilestoneStatus.PENDING
    submission: str | None = None
    feedback: str | None = None
    updated_at: datetime


class Project(BaseModel):
    """Project record with its milestones embedded in display order."""

    model_config = ConfigDict(extra="ignore")

    project_id: str
    student_id: str
    mentor_id: str | None = None
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    idea: str = Field(..., min_length=1)
    guidance_needed: str | None = None
    keywords: list[str] = Field(default_factory=list)
    status: ProjectStatus = ProjectStatus.DRAFT
    progress: int = Field(0, ge=0, le=100)
    milestones: list[Milestone] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def get_milestone(self, milestone_id: str) -> Milestone | None:
        for milestone in self.milestones:
            if milestone.milestone_id == milestone_id:
                return milestone
        return None


# ── Request models ─────────────────────────────────────────────────────────────
# Required text fields are optional here so that missing and blank values are
# rejected by the state machine with a single VALIDATION_ERROR.

class ProjectCreate(BaseModel):
    title: str | None = None
    idea: str | None = None
    guidance_needed: str | None = None
    keywords: list[str] | str | None = None
    mentor_id: str | None = None


class ProjectUpdate(BaseModel):
    title: str | None = None
    idea: str | None = None
    guidance_needed: str | None = None
    keywords: list[str] | str | None = None
    mentor_id: str | None = None


class MentorshipRequestBody(BaseModel):
    mentor_id: str = Field(..., min_length=1)


class RespondToRequestBody(BaseModel):
    project_id: str
    status: str


class CompleteMentorshipBody(BaseModel):
    project_id: str


class MilestoneCreate(BaseModel):
    project_id: str
    title: str | None = None
    description: str | None = None
    due_date: str | date | None = None


class MilestoneSubmit(BaseModel):
    project_id: str
    milestone_id: str
    submission: str | None = None


class MilestoneFileSubmit(BaseModel):
    """Submission by reference to an artifact stored by the upload service."""

    project_id: str
    milestone_id: str
    file_url: str | None = None


class MilestoneRef(BaseModel):
    project_id: str
    milestone_id: str


class MilestoneEvaluate(BaseModel):
    project_id: str
    milestone_id: str
    status: str
    feedback: str | None = None


# ── Response models ────────────────────────────────────────────────────────────

class MentorStats(BaseModel):
    active_mentees: int
    pending_requests: int
    completed_projects: int
