"""String enums for roles, statuses and notification kinds."""

from enum import StrEnum


class Role(StrEnum):
    STUDENT = "student"
    MENTOR = "mentor"


class ProjectStatus(StrEnum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MilestoneStatus(StrEnum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    COMPLETED = "completed"


class RequestDecision(StrEnum):
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationKind(StrEnum):
    MENTORSHIP_REQUESTED = "mentorship_requested"
    MENTORSHIP_APPROVED = "mentorship_approved"
    MENTORSHIP_REJECTED = "mentorship_rejected"
    MENTORSHIP_COMPLETED = "mentorship_completed"
    MILESTONE_ADDED = "milestone_added"
    MILESTONE_SUBMITTED = "milestone_submitted"
    MILESTONE_APPROVED = "milestone_approved"
    MILESTONE_REJECTED = "milestone_rejected"
    NEW_MESSAGE = "new_message"


# Statuses that occupy one of a mentor's intake slots
ACTIVE_PROJECT_STATUSES = (ProjectStatus.APPROVED, ProjectStatus.IN_PROGRESS)
