from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .logging_utils import configure_logging
from .routers import status as status_router
from .routers import websockets as ws_router
from .state import ServerState

logger = logging.getLogger(__name__)

# -----------------------------
# FastAPI app factory
# -----------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build an app with its own, empty session registry."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="Vanguard Sync Server")
    app.state.settings = settings
    app.state.relay = ServerState()

    # Peers connect from arbitrary origins by default
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(status_router.router)
    app.include_router(ws_router.router)
    return app


def serve(settings: Optional[Settings] = None) -> None:
    """Console entry point: run the relay under uvicorn."""
    import uvicorn

    settings = settings or Settings.from_env()
    app = create_app(settings)
    logger.info("Signaling server listening on ws://%s:%d/ws", settings.host, settings.port)
    logger.info("Status: http://%s:%d/status", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


__all__ = ["create_app", "serve"]
