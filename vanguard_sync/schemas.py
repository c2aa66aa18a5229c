"""Pydantic data schemas used across the relay service.

Field names follow the wire contract (camelCase) so that payloads can be
validated and dumped without an alias layer.
"""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel

# -----------------------------
# Inbound frames
# -----------------------------

class ClientMessage(BaseModel):
    """Envelope of every frame received on the websocket."""

    type: str
    # Checked per event so a bad join payload still earns a join_error
    data: Any = None


class JoinSessionRequest(BaseModel):
    # Presence is checked by the router so that missing fields become a join_error
    sessionToken: Optional[str] = None
    pcName: Optional[str] = None
    userKey: Optional[str] = None


class SendSignalRequest(BaseModel):
    toPC: Optional[str] = None
    signalType: Optional[str] = None
    signalData: Any = None  # opaque, relayed verbatim


# -----------------------------
# Outbound events
# -----------------------------

class SessionInfo(BaseModel):
    token: str
    connectedPCs: List[str]


class JoinedEvent(BaseModel):
    success: bool = True
    message: str
    sessionInfo: SessionInfo


class JoinErrorEvent(BaseModel):
    message: str


class PeerEvent(BaseModel):
    """Payload of ``peer_connected`` and ``peer_disconnected``."""

    pc: str


class ReceiveSignalEvent(BaseModel):
    fromPC: str
    signalType: Optional[str] = None
    signalData: Any = None
    timestamp: int


class SignalSentEvent(BaseModel):
    success: bool
    message: Optional[str] = None  # only set on failure


class PongEvent(BaseModel):
    timestamp: int


# -----------------------------
# HTTP status surface
# -----------------------------

class StatusResponse(BaseModel):
    status: str = "online"
    activeSessions: int
    connectedClients: int
    uptime: float
    timestamp: str


__all__ = [
    # inbound
    "ClientMessage",
    "JoinSessionRequest",
    "SendSignalRequest",
    # outbound
    "SessionInfo",
    "JoinedEvent",
    "JoinErrorEvent",
    "PeerEvent",
    "ReceiveSignalEvent",
    "SignalSentEvent",
    "PongEvent",
    # http
    "StatusResponse",
]
