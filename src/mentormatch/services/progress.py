"""Project progress derived from milestone states."""

from mentormatch.models.enums import MilestoneStatus, ProjectStatus
from mentormatch.models.project import Project

MILESTONE_POINTS = {
    MilestoneStatus.COMPLETED: 100,
    MilestoneStatus.SUBMITTED: 50,
    MilestoneStatus.PENDING: 0,
}


def compute_progress(statuses: list[MilestoneStatus]) -> int:
    """Percentage of milestone points earned, rounded half up."""
    if not statuses:
        return 0
    total = 100 * len(statuses)
    earned = sum(MILESTONE_POINTS.get(status, 0) for status in statuses)
    return (200 * earned + total) // (2 * total)


def recompute_progress(project: Project) -> Project:
    """Refresh ``project.progress`` and move its status forward to match.

    Full completion marks the project completed, any progress marks it in
    progress, and zero progress leaves the status alone. Must run after every
    milestone mutation.
    """
    if not project.milestones:
        project.progress = 0
        return project

    progress = compute_progress([m.status for m in project.milestones])
    project.progress = progress
    if progress == 100:
        project.status = ProjectStatus.COMPLETED
    elif progress > 0:
        project.status = ProjectStatus.IN_PROGRESS
    return project
