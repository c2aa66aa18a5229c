"""Runtime state shared by the routers of one application instance.

A single ``ServerState`` is created by ``create_app`` and stored on
``app.state.relay``; endpoints read it from the app they are mounted on.
"""
from __future__ import annotations

import time
from typing import Set

from fastapi import Request

from .connection import Connection
from .registry import SessionRegistry


class ServerState:
    def __init__(self) -> None:
        self.registry = SessionRegistry()
        # Every open websocket, joined or not
        self.connections: Set[Connection] = set()
        self.started_at = time.monotonic()

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.started_at

    @property
    def connected_clients(self) -> int:
        return len(self.connections)

    @property
    def active_sessions(self) -> int:
        return self.registry.session_count()


def get_state(request: Request) -> ServerState:
    """FastAPI dependency returning the state attached to the running app."""
    return request.app.state.relay


__all__ = ["ServerState", "get_state"]
