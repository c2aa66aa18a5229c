from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import WebSocket

from .constants import Slot

logger = logging.getLogger(__name__)


class Connection:
    """One live websocket plus the session binding it acquired on join.

    Outbound events go through a bounded queue drained by a writer task, so
    ``emit`` never awaits. When the queue is full or the connection has been
    closed the event is dropped.
    """

    def __init__(self, ws: WebSocket, queue_size: int = 256):
        self.ws = ws
        self.conn_id = uuid.uuid4().hex[:8]
        # Set by the signal router on join
        self.session_token: Optional[str] = None
        self.slot: Optional[Slot] = None

        self._outbox: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._writer: Optional[asyncio.Task] = None
        self._closed = False

    # ---------------------------------------------------------------------
    # Session binding
    # ---------------------------------------------------------------------

    @property
    def joined(self) -> bool:
        return self.session_token is not None and self.slot is not None

    def bind(self, token: str, slot: Slot) -> None:
        self.session_token = token
        self.slot = slot

    # ---------------------------------------------------------------------
    # Outbound channel
    # ---------------------------------------------------------------------

    def start(self) -> None:
        """Spawn the writer task. Must be called from the event loop."""
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def emit(self, event: str, payload: Dict[str, Any]) -> bool:
        """Queue *event* for delivery. Returns ``False`` if it was dropped."""
        if self._closed:
            logger.warning("Dropping %s for closed connection %s", event, self.conn_id)
            return False
        try:
            self._outbox.put_nowait({"type": event, "data": payload})
        except asyncio.QueueFull:
            logger.warning("Outbound queue full for %s, dropping %s", self.conn_id, event)
            return False
        return True

    async def _drain(self) -> None:
        while True:
            message = await self._outbox.get()
            try:
                await self.ws.send_json(message)
            except Exception:
                # Peer went away mid-send; the receive loop will notice shortly
                logger.warning("Send to %s failed, stopping writer", self.conn_id)
                self._closed = True
                return

    async def close(self) -> None:
        """Stop accepting events and cancel the writer task."""
        self._closed = True
        if self._writer is not None and not self._writer.done():
            self._writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._writer
            self._writer = None

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        return f"Connection({self.conn_id}, token={self.session_token!r}, slot={self.slot})"


__all__ = ["Connection"]
