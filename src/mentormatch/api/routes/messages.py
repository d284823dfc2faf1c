"""Direct messaging routes."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.config import settings
from mentormatch.db.models.message import MessageRow
from mentormatch.dependencies import CurrentActor, Registry, get_db
from mentormatch.errors.exceptions import NotFoundError, ValidationError
from mentormatch.events.notifications import emit_notification, push_event
from mentormatch.models.enums import NotificationKind
from mentormatch.models.message import Conversation, Message, MessageCreate, Participant
from mentormatch.repositories.message_repo import MessageRepository
from mentormatch.repositories.user_repo import UserRepository
from mentormatch.services.id_generator import generate_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["Messages"])


def _participant(row) -> Participant | None:
    if row is None:
        return None
    return Participant(user_id=row.user_id, name=row.name, role=row.role)


async def _present(db: AsyncSession, messages: list[MessageRow]) -> list[dict]:
    ids = {m.sender_id for m in messages} | {m.receiver_id for m in messages}
    users = {u.user_id: u for u in await UserRepository(db).list_by_ids(sorted(ids))}
    out = []
    for m in messages:
        message = Message.model_validate(m)
        message.sender = _participant(users.get(m.sender_id))
        message.receiver = _participant(users.get(m.receiver_id))
        out.append(message.model_dump(mode="json"))
    return out


@router.post("", status_code=201)
async def send_message(
    body: MessageCreate,
    actor: CurrentActor,
    registry: Registry,
    db: AsyncSession = Depends(get_db),
) -> dict:
    content = (body.content or "").strip()
    if not body.receiver_id or body.content is None:
        raise ValidationError("receiver_id and content are required")
    if not content:
        raise ValidationError("Message content cannot be empty")
    if len(content) > settings.max_message_length:
        raise ValidationError(
            f"Message content exceeds {settings.max_message_length} characters",
            {"max_length": settings.max_message_length},
        )
    if body.receiver_id == actor.user_id:
        raise ValidationError("Cannot send a message to yourself")

    users = UserRepository(db)
    receiver = await users.get(body.receiver_id)
    if not receiver:
        raise NotFoundError("User", body.receiver_id)

    row = await MessageRepository(db).create(
        message_id=generate_id("msg_"),
        sender_id=actor.user_id,
        receiver_id=receiver.user_id,
        content=content,
        read=False,
    )
    await db.commit()
    await db.refresh(row)

    payload = (await _present(db, [row]))[0]
    for user_id in (receiver.user_id, actor.user_id):
        push_event(registry, user_id, "new_message", payload)

    sender = payload.get("sender") or {}
    await emit_notification(
        NotificationKind.NEW_MESSAGE,
        receiver.user_id,
        {"sender_name": sender.get("name")},
        db_session=db,
        registry=registry,
    )
    return payload


@router.get("/conversations")
async def list_conversations(actor: CurrentActor, db: AsyncSession = Depends(get_db)) -> list[dict]:
    """One entry per counterpart, most recently active first."""
    repo = MessageRepository(db)
    latest: dict[str, MessageRow] = {}
    for m in await repo.list_for_user(actor.user_id):
        other = m.receiver_id if m.sender_id == actor.user_id else m.sender_id
        latest.setdefault(other, m)

    users = {u.user_id: u for u in await UserRepository(db).list_by_ids(list(latest))}
    conversations = []
    for other_id, last in latest.items():
        user = users.get(other_id)
        if user is None:
            continue
        conversations.append(
            Conversation(
                user_id=user.user_id,
                name=user.name,
                role=user.role,
                email=user.email,
                last_message=last.content,
                last_message_time=last.sent_at,
                unread_count=await repo.count_unread(other_id, actor.user_id),
            )
        )
    # list_for_user is newest first, so insertion order is already the display order
    return [c.model_dump(mode="json") for c in conversations]


@router.put("/read/{other_user_id}")
async def mark_read(
    other_user_id: str,
    actor: CurrentActor,
    db: AsyncSession = Depends(get_db),
) -> dict:
    updated = await MessageRepository(db).mark_read(other_user_id, actor.user_id)
    await db.commit()
    return {"message": "Messages marked as read", "updated": updated}


@router.get("/{other_user_id}")
async def get_conversation(
    other_user_id: str,
    actor: CurrentActor,
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    messages = await MessageRepository(db).list_conversation(actor.user_id, other_user_id)
    return await _present(db, messages)
