"""Per-connection signaling protocol.

A ``SignalRouter`` is created for every websocket. It validates join
requests, relays opaque signals between the two slots of a session and
tells the remaining peer when its counterpart goes away. All session
membership changes go through the injected ``SessionRegistry``.

Handlers are synchronous: registry calls never block and outbound events
are queued on the target connection without waiting for delivery.
"""
from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from .connection import Connection
from .constants import (
    INVALID_JOIN_MESSAGE,
    JOIN_ERROR,
    JOIN_SESSION,
    JOINED,
    PEER_CONNECTED,
    PEER_DISCONNECTED,
    PING,
    PONG,
    RECEIVE_SIGNAL,
    SEND_SIGNAL,
    SIGNAL_SENT,
    Slot,
)
from .registry import SessionRegistry
from .schemas import (
    ClientMessage,
    JoinErrorEvent,
    JoinedEvent,
    JoinSessionRequest,
    PeerEvent,
    PongEvent,
    ReceiveSignalEvent,
    SendSignalRequest,
    SessionInfo,
    SignalSentEvent,
)

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class RouterState(str, Enum):
    UNJOINED = "unjoined"
    JOINED = "joined"
    CLOSED = "closed"


class SignalRouter:
    """Protocol state machine bound to one connection."""

    def __init__(self, registry: SessionRegistry, connection: Connection):
        self.registry = registry
        self.connection = connection
        self.state = RouterState.UNJOINED

    # ---------------------------------------------------------------------
    # Dispatch
    # ---------------------------------------------------------------------

    def dispatch(self, message: ClientMessage) -> None:
        data = message.data if message.data is not None else {}
        if message.type == JOIN_SESSION:
            self.handle_join(data)
        elif message.type == SEND_SIGNAL:
            self.handle_signal(data)
        elif message.type == PING:
            self.handle_ping()
        else:
            logger.warning("Ignoring unknown event %r from %s", message.type, self.connection.conn_id)

    # ---------------------------------------------------------------------
    # join_session
    # ---------------------------------------------------------------------

    def handle_join(self, data: Any) -> bool:
        """Join the session named in *data*. Returns ``True`` on success."""
        try:
            req = JoinSessionRequest.model_validate(data)
        except ValidationError:
            req = None
        slot = Slot.parse(req.pcName) if req else None
        # userKey is only checked for presence
        if req is None or not req.sessionToken or not req.userKey or slot is None:
            logger.info("Rejected join from %s", self.connection.conn_id)
            self.connection.emit(JOIN_ERROR, JoinErrorEvent(message=INVALID_JOIN_MESSAGE).model_dump())
            return False

        token = req.sessionToken
        conn = self.connection
        if conn.joined and (conn.session_token, conn.slot) != (token, slot):
            # Re-join on the same socket moves it out of its old slot
            self._release()

        connected = self.registry.join(token, slot, conn)
        conn.bind(token, slot)
        self.state = RouterState.JOINED
        logger.info("%s joined session %s (%s)", slot.value, token, conn.conn_id)

        conn.emit(
            JOINED,
            JoinedEvent(
                success=True,
                message=f"{slot.value} connected",
                sessionInfo=SessionInfo(token=token, connectedPCs=connected),
            ).model_dump(),
        )

        peer = self.registry.lookup_peer(token, slot)
        if peer is not None:
            peer.emit(PEER_CONNECTED, PeerEvent(pc=slot.value).model_dump())
        return True

    # ---------------------------------------------------------------------
    # send_signal
    # ---------------------------------------------------------------------

    def handle_signal(self, data: Any) -> bool:
        """Relay a signal to the slot named by ``toPC``. Returns ``True`` if delivered."""
        conn = self.connection
        if not conn.joined:
            return False

        try:
            req = SendSignalRequest.model_validate(data)
        except ValidationError:
            logger.warning("Malformed send_signal from %s", conn.conn_id)
            req = SendSignalRequest()

        # Addressed by the caller, so a slot may target itself
        target_slot = Slot.parse(req.toPC)
        target: Optional[Connection] = None
        if target_slot is not None:
            target = self.registry.lookup(conn.session_token, target_slot)

        if target is None:
            conn.emit(
                SIGNAL_SENT,
                SignalSentEvent(success=False, message=f"{req.toPC} not connected").model_dump(exclude_none=True),
            )
            return False

        target.emit(
            RECEIVE_SIGNAL,
            ReceiveSignalEvent(
                fromPC=conn.slot.value,
                signalType=req.signalType,
                signalData=req.signalData,
                timestamp=now_ms(),
            ).model_dump(),
        )
        logger.info(
            "Signal %s: %s -> %s in %s", req.signalType, conn.slot.value, target_slot.value, conn.session_token
        )
        conn.emit(SIGNAL_SENT, SignalSentEvent(success=True).model_dump(exclude_none=True))
        return True

    # ---------------------------------------------------------------------
    # ping / disconnect
    # ---------------------------------------------------------------------

    def handle_ping(self) -> None:
        self.connection.emit(PONG, PongEvent(timestamp=now_ms()).model_dump())

    def disconnect(self) -> None:
        """Release this connection's slot and notify the remaining peer.

        A connection whose slot was taken over by a later join releases
        nothing and sends no ``peer_disconnected``; the slot belongs to
        the newcomer.
        """
        if self.state is RouterState.CLOSED:
            return
        self.state = RouterState.CLOSED
        if self.connection.joined:
            self._release()

    def _release(self) -> None:
        conn = self.connection
        token, slot = conn.session_token, conn.slot
        if not self.registry.leave(token, slot, conn):
            # Slot was already taken over by another connection
            return
        logger.info("%s left session %s (%s)", slot.value, token, conn.conn_id)

        peer = self.registry.lookup_peer(token, slot)
        if peer is not None:
            peer.emit(PEER_DISCONNECTED, PeerEvent(pc=slot.value).model_dump())


__all__ = ["SignalRouter", "RouterState", "now_ms"]
