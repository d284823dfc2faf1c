"""Pydantic models for user-facing notifications."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Notification(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notification_id: str
    recipient_id: str
    kind: str
    title: str
    body: str
    severity: str = "info"
    project_id: str | None = None
    mentor_id: str | None = None
    mentor_name: str | None = None
    read: bool
    created_at: datetime
