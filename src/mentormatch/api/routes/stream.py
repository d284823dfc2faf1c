"""Server-Sent Events stream endpoint for real-time notifications."""

import asyncio
import json
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from mentormatch.config import settings
from mentormatch.dependencies import CurrentActor, Registry
from mentormatch.events.connection_registry import ConnectionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stream"])


async def _event_generator(
    request: Request,
    registry: ConnectionRegistry | None,
    user_id: str,
) -> AsyncGenerator[str, None]:
    """Yield SSE-formatted events published to the user's connection handle."""
    if registry is None:
        yield "data: {\"type\": \"connected\", \"message\": \"SSE inactive (no registry), polling recommended\"}\n\n"
        return

    handle = registry.open_handle()
    registry.join(user_id, handle)
    logger.info("SSE subscriber connected (user=%s)", user_id)

    try:
        yield f"data: {json.dumps({'type': 'connected', 'user_id': user_id})}\n\n"

        while True:
            if await request.is_disconnected():
                break
            try:
                event = await asyncio.wait_for(handle.get(), timeout=settings.stream_keepalive_seconds)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            yield f"data: {json.dumps(event, default=str)}\n\n"

    except asyncio.CancelledError:
        pass
    finally:
        registry.leave(user_id, handle)
        logger.info("SSE subscriber disconnected (user=%s)", user_id)


@router.get("/stream/events")
async def stream_events(request: Request, actor: CurrentActor, registry: Registry):
    """Stream real-time events via SSE for the authenticated user."""
    return StreamingResponse(
        _event_generator(request, registry, actor.user_id),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
            "Connection": "keep-alive",
        },
    )
