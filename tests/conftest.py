from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest
from fastapi.testclient import TestClient

from vanguard_sync.app import create_app
from vanguard_sync.config import Settings
from vanguard_sync.connection import Connection
from vanguard_sync.registry import SessionRegistry


class RecordingConnection(Connection):
    """Connection whose outbound events are kept in a list instead of sent."""

    def __init__(self) -> None:
        super().__init__(ws=None)
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def emit(self, event: str, payload: Dict[str, Any]) -> bool:
        self.events.append((event, payload))
        return True

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def make_conn():
    return RecordingConnection


@pytest.fixture
def client():
    app = create_app(Settings())
    # One shared event loop for every websocket opened through this client
    with TestClient(app) as test_client:
        yield test_client
