"""Snapshot stream — bridges one live subscription to a Server-Sent Events response."""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from scenario_manager.application.services.subscription import Subscription

logger = logging.getLogger(__name__)


class SnapshotStream:
    """Turns subscription callbacks into formatted SSE messages.

    Every snapshot is the complete current result set, so when the client
    falls behind only the newest pending snapshot is worth sending: a full
    queue drops its oldest message. The subscription is released when the
    event generator finishes, which Starlette triggers on client disconnect.
    """

    def __init__(self, event_type: str = "snapshot", max_pending: int = 8) -> None:
        self._event_type = event_type
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=max_pending)

    def push(self, data: Any) -> None:
        """Queue a JSON-serialisable snapshot for the client."""
        message = f"event: {self._event_type}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"
        if self._queue.full():
            self._queue.get_nowait()
            logger.debug("SSE client is behind — dropped a stale snapshot")
        self._queue.put_nowait(message)

    def end(self) -> None:
        """Finish the stream after the messages already queued."""
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    async def events(self, subscription: Subscription) -> AsyncGenerator[str, None]:
        """Yield SSE messages until ended; always closes the subscription."""
        with subscription:
            while True:
                message = await self._queue.get()
                if message is None:
                    break
                yield message

    @property
    def pending(self) -> int:
        return self._queue.qsize()
