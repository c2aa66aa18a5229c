from __future__ import annotations

from enum import Enum
from typing import Optional


class Slot(str, Enum):
    """The two membership positions of a session."""

    PC1 = "pc1"
    PC2 = "pc2"

    def opposite(self) -> "Slot":
        return Slot.PC2 if self is Slot.PC1 else Slot.PC1

    @classmethod
    def parse(cls, raw: object) -> Optional["Slot"]:
        """Return the slot named by *raw* (case-insensitive), or ``None``."""
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.lower())
        except ValueError:
            return None


# Client -> server events
JOIN_SESSION = "join_session"
SEND_SIGNAL = "send_signal"
PING = "ping"

# Server -> client events
JOINED = "joined"
JOIN_ERROR = "join_error"
PEER_CONNECTED = "peer_connected"
PEER_DISCONNECTED = "peer_disconnected"
RECEIVE_SIGNAL = "receive_signal"
SIGNAL_SENT = "signal_sent"
PONG = "pong"

INVALID_JOIN_MESSAGE = "Invalid data"

__all__ = [
    "Slot",
    "JOIN_SESSION",
    "SEND_SIGNAL",
    "PING",
    "JOINED",
    "JOIN_ERROR",
    "PEER_CONNECTED",
    "PEER_DISCONNECTED",
    "RECEIVE_SIGNAL",
    "SIGNAL_SENT",
    "PONG",
    "INVALID_JOIN_MESSAGE",
]
