"""In-memory session registry.

Maps a session token to the slots currently occupied in that session and
the connection handle sitting in each slot. A session only exists while
at least one of its slots is occupied.

Every operation runs under a single ``threading.Lock``. Nothing inside the
lock awaits or performs I/O, so the registry can be called from coroutine
handlers without stalling the event loop.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

from .constants import Slot

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Token -> {slot -> handle} mapping with atomic join / lookup / leave."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # dicts preserve insertion order, which is the order reported to peers
        self._sessions: Dict[str, Dict[Slot, Any]] = {}

    # -------------------- Membership -------------------- #

    def join(self, token: str, slot: Slot, handle: Any) -> List[str]:
        """Place *handle* in *slot* of session *token*.

        Creates the session on first use. A handle already occupying the
        slot is replaced without notice (last writer wins). Returns the
        names of the slots occupied after the join.
        """
        with self._lock:
            session = self._sessions.setdefault(token, {})
            if slot in session and session[slot] is not handle:
                logger.info("Slot %s of session %s taken over by a new connection", slot.value, token)
            session[slot] = handle
            return [s.value for s in session]

    def leave(self, token: str, slot: Slot, handle: Any = None) -> bool:
        """Vacate *slot* of session *token*; drop the session once empty.

        When *handle* is given the slot is only vacated if that handle still
        occupies it. Returns ``True`` if an entry was removed; repeated calls
        are no-ops that return ``False``.
        """
        with self._lock:
            session = self._sessions.get(token)
            if session is None or slot not in session:
                return False
            if handle is not None and session[slot] is not handle:
                return False
            del session[slot]
            if not session:
                del self._sessions[token]
            return True

    # -------------------- Lookups -------------------- #

    def lookup(self, token: str, slot: Slot) -> Optional[Any]:
        """Return the handle occupying *slot*, or ``None``."""
        with self._lock:
            session = self._sessions.get(token)
            return session.get(slot) if session else None

    def lookup_peer(self, token: str, slot: Slot) -> Optional[Any]:
        """Return the handle in the slot opposite to *slot*, or ``None``."""
        return self.lookup(token, slot.opposite())

    def connected_slots(self, token: str) -> List[str]:
        with self._lock:
            return [s.value for s in self._sessions.get(token, {})]

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._sessions


__all__ = ["SessionRegistry"]
