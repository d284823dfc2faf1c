"""Pydantic models for direct messages between matched users."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class MessageCreate(BaseModel):
    receiver_id: str | None = None
    content: str | None = None


class Participant(BaseModel):
    user_id: str
    name: str
    role: str


class Message(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message_id: str
    sender_id: str
    receiver_id: str
    content: str
    read: bool
    sent_at: datetime
    sender: Participant | None = None
    receiver: Participant | None = None


class Conversation(BaseModel):
    user_id: str
    name: str
    role: str
    email: str
    last_message: str
    last_message_time: datetime | None
    unread_count: int
