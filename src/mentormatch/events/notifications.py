"""Notification sink: records user-facing notifications and pushes them live.

Wraps the connection registry and also creates notification records.
Delivery is best-effort: a failure here is logged and never undoes the state
change that triggered it.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.events.connection_registry import ConnectionRegistry
from mentormatch.models.enums import NotificationKind
from mentormatch.services.id_generator import generate_id

logger = logging.getLogger(__name__)

# Notification kind -> severity shown by clients
KIND_SEVERITY = {
    NotificationKind.MENTORSHIP_REQUESTED: "info",
    NotificationKind.MENTORSHIP_APPROVED: "success",
    NotificationKind.MENTORSHIP_REJECTED: "warning",
    NotificationKind.MENTORSHIP_COMPLETED: "success",
    NotificationKind.MILESTONE_ADDED: "info",
    NotificationKind.MILESTONE_SUBMITTED: "info",
    NotificationKind.MILESTONE_APPROVED: "success",
    NotificationKind.MILESTONE_REJECTED: "warning",
    NotificationKind.NEW_MESSAGE: "info",
}

KIND_TITLES = {
    NotificationKind.MENTORSHIP_REQUESTED: "New mentorship request",
    NotificationKind.MENTORSHIP_APPROVED: "Mentor approved",
    NotificationKind.MENTORSHIP_REJECTED: "Mentor request rejected",
    NotificationKind.MENTORSHIP_COMPLETED: "Mentorship completed",
    NotificationKind.MILESTONE_ADDED: "New milestone",
    NotificationKind.MILESTONE_SUBMITTED: "Milestone submitted",
    NotificationKind.MILESTONE_APPROVED: "Milestone approved",
    NotificationKind.MILESTONE_REJECTED: "Milestone needs revision",
    NotificationKind.NEW_MESSAGE: "New message",
}


def build_notification_body(kind: NotificationKind, payload: dict) -> str:
    """Build the human-readable notification body."""
    mentor = payload.get("mentor_name") or "Your mentor"
    student = payload.get("student_name") or "A student"
    project = payload.get("project_title") or "your project"
    milestone = payload.get("milestone_title") or "a milestone"

    if kind == NotificationKind.MENTORSHIP_REQUESTED:
        return f"{student} requested your mentorship for \"{project}\"."
    if kind == NotificationKind.MENTORSHIP_APPROVED:
        return f"{mentor} has approved your mentorship request! You can now chat with them."
    if kind == NotificationKind.MENTORSHIP_REJECTED:
        return f"{mentor} declined your mentorship request. You can try another mentor."
    if kind == NotificationKind.MENTORSHIP_COMPLETED:
        return f"{mentor} marked \"{project}\" as completed."
    if kind == NotificationKind.MILESTONE_ADDED:
        return f"{mentor} added the milestone \"{milestone}\" to \"{project}\"."
    if kind == NotificationKind.MILESTONE_SUBMITTED:
        return f"{student} submitted \"{milestone}\" for review."
    if kind == NotificationKind.MILESTONE_APPROVED:
        return f"Milestone \"{milestone}\" has been approved by your mentor!"
    if kind == NotificationKind.MILESTONE_REJECTED:
        feedback = payload.get("feedback")
        suffix = f" Feedback: {feedback}" if feedback else ""
        return f"Milestone \"{milestone}\" needs revision.{suffix}"
    if kind == NotificationKind.NEW_MESSAGE:
        sender = payload.get("sender_name") or "Someone"
        return f"{sender} sent you a message. Check your chat to read it."
    return f"Notification: {kind}"


def push_event(registry: ConnectionRegistry | None, user_id: str, event_type: str, payload: dict) -> int:
    """Push a raw event to a user's live connections."""
    if registry is None:
        return 0
    try:
        return registry.publish(user_id, {"type": event_type, **payload})
    except Exception as exc:
        logger.warning("Failed to push %s event to %s: %s", event_type, user_id, exc)
        return 0


async def emit_notification(
    kind: NotificationKind,
    recipient_id: str,
    payload: dict,
    *,
    db_session: AsyncSession | None = None,
    registry: ConnectionRegistry | None = None,
) -> dict:
    """Record a notification for ``recipient_id`` and push it to their connections.

    Args:
        kind: Notification kind.
        recipient_id: User who should see the notification.
        payload: Event data (project_id, project_title, mentor_id, mentor_name, ...).
        db_session: Optional AsyncSession used to persist the notification.
        registry: Optional connection registry for live delivery.

    Returns:
        Dict with notification_id (None when not persisted) and live delivery count.
    """
    notification = {
        "notification_id": generate_id("notif_"),
        "recipient_id": recipient_id,
        "kind": str(kind),
        "title": KIND_TITLES.get(kind, str(kind)),
        "body": build_notification_body(kind, payload),
        "severity": KIND_SEVERITY.get(kind, "info"),
        "project_id": payload.get("project_id"),
        "mentor_id": payload.get("mentor_id"),
        "mentor_name": payload.get("mentor_name"),
    }
    result = {"notification_id": None, "deliveries": 0}

    if db_session is not None:
        try:
            from mentormatch.db.models.notification import NotificationRow

            db_session.add(NotificationRow(**notification, read=False))
            await db_session.commit()
            result["notification_id"] = notification["notification_id"]
        except Exception as exc:
            logger.warning("Failed to store %s notification for %s: %s", kind, recipient_id, exc)
            await db_session.rollback()

    result["deliveries"] = push_event(registry, recipient_id, "notification", notification)
    return result
