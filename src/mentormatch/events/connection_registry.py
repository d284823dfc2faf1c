"""Registry of live client connections keyed by user id.

A connection handle is a bounded ``asyncio.Queue`` owned by one stream
subscriber. The mentorship core only ever calls ``publish``.
"""

import asyncio
import logging
from collections import defaultdict

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """In-process fan-out of events to every connection a user holds."""

    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._connections: dict[str, list[asyncio.Queue]] = defaultdict(list)

    def open_handle(self) -> asyncio.Queue:
        return asyncio.Queue(maxsize=self._queue_size)

    def join(self, user_id: str, handle: asyncio.Queue) -> None:
        handles = self._connections[str(user_id)]
        if handle not in handles:
            handles.append(handle)
        logger.debug("Connection joined (user=%s, connections=%d)", user_id, len(handles))

    def leave(self, user_id: str, handle: asyncio.Queue | None = None) -> None:
        """Drop one connection, or all of the user's connections when ``handle`` is None."""
        uid = str(user_id)
        if handle is None:
            self._connections.pop(uid, None)
            return
        handles = self._connections.get(uid, [])
        if handle in handles:
            handles.remove(handle)
        if not handles:
            self._connections.pop(uid, None)

    def publish(self, user_id: str, event: dict) -> int:
        """Queue ``event`` on each of the user's connections; returns how many took it."""
        delivered = 0
        for handle in list(self._connections.get(str(user_id), [])):
            try:
                handle.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("Dropping %s event for slow connection (user=%s)", event.get("type"), user_id)
        return delivered

    def connection_count(self, user_id: str | None = None) -> int:
        if user_id is not None:
            return len(self._connections.get(str(user_id), []))
        return sum(len(h) for h in self._connections.values())
