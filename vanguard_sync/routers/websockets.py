from __future__ import annotations

import contextlib
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from ..connection import Connection
from ..schemas import ClientMessage
from ..signaling import SignalRouter
from ..state import ServerState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["ws"])


@router.websocket("/ws")
async def signaling_endpoint(ws: WebSocket):
    state: ServerState = ws.app.state.relay
    await ws.accept()

    conn = Connection(ws, queue_size=ws.app.state.settings.outbound_queue_size)
    conn.start()
    state.connections.add(conn)
    signals = SignalRouter(state.registry, conn)
    logger.info("Client connected: %s", conn.conn_id)

    try:
        while True:
            frame = await ws.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                logger.warning("Ignoring binary frame from %s", conn.conn_id)
                continue
            try:
                message = ClientMessage.model_validate_json(raw)
            except ValidationError:
                logger.warning("Ignoring malformed frame from %s", conn.conn_id)
                continue
            signals.dispatch(message)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error on %s", conn.conn_id)
        with contextlib.suppress(Exception):
            await ws.close(code=1011)
    finally:
        signals.disconnect()
        state.connections.discard(conn)
        await conn.close()
        logger.info("Client disconnected: %s", conn.conn_id)
