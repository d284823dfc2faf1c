"""Notification inbox routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.dependencies import CurrentActor, get_db
from mentormatch.errors.exceptions import NotFoundError
from mentormatch.models.notification import Notification
from mentormatch.repositories.notification_repo import NotificationRepository

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
async def list_notifications(
    actor: CurrentActor,
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    rows = await NotificationRepository(db).list_for_recipient(actor.user_id, unread_only, limit)
    return [Notification.model_validate(r).model_dump(mode="json") for r in rows]


@router.post("/read-all")
async def mark_all_read(actor: CurrentActor, db: AsyncSession = Depends(get_db)) -> dict:
    updated = await NotificationRepository(db).mark_all_read(actor.user_id)
    await db.commit()
    return {"updated": updated}


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    actor: CurrentActor,
    db: AsyncSession = Depends(get_db),
) -> dict:
    repo = NotificationRepository(db)
    row = await repo.get(notification_id)
    # Someone else's notification is reported as missing
    if not row or row.recipient_id != actor.user_id:
        raise NotFoundError("Notification", notification_id)
    await repo.update(row, read=True)
    await db.commit()
    return Notification.model_validate(row).model_dump(mode="json")
