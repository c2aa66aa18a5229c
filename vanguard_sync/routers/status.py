from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ..schemas import StatusResponse
from ..state import ServerState, get_state

router = APIRouter(prefix="", tags=["status"])


@router.get("/status", response_model=StatusResponse)
async def status(state: ServerState = Depends(get_state)):
    return StatusResponse(
        status="online",
        activeSessions=state.active_sessions,
        connectedClients=state.connected_clients,
        uptime=state.uptime,
        timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    )


@router.get("/", response_class=HTMLResponse)
async def home(state: ServerState = Depends(get_state)):
    return f"""
        <h1>Vanguard Sync Server</h1>
        <p>Status: Online</p>
        <p>Active Sessions: {state.active_sessions}</p>
        <p>Connected Clients: {state.connected_clients}</p>
        <p>Uptime: {int(state.uptime)} seconds</p>
        <a href="/status">JSON Status</a>
    """
