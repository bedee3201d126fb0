"""FastAPI application entry point.

Run with ``uvicorn nexus_crusher.main:app`` (install the ``server`` extra).
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from nexus_crusher import __version__
from nexus_crusher.api.routes.recommendations import router as recommendations_router
from nexus_crusher.api.routes.session import router as session_router
from nexus_crusher.api.websockets.session_ws import SessionEventHub, session_websocket
from nexus_crusher.config import get_settings
from nexus_crusher.context import build_context
from nexus_crusher.services.session_observer import LcuSessionObserver

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the context on startup and tear it down on shutdown."""
    owns_context = not hasattr(app.state, "context")
    if owns_context:
        app.state.context = build_context(settings)
    if not hasattr(app.state, "event_hub"):
        app.state.event_hub = SessionEventHub()
    context = app.state.context
    context.events.add_sink(app.state.event_hub.publish)

    if owns_context:
        context.start()
        observer = context.observer
        if settings.auto_connect and isinstance(observer, LcuSessionObserver):
            # Don't block startup; the connector keeps searching in the background
            observer.connect(timeout=0)
    yield
    context.events.remove_sink(app.state.event_hub.publish)
    if owns_context:
        context.close()
        del app.state.context


app = FastAPI(
    title="Nexus Crusher",
    description="LoL champion select companion - live pick recommendations",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "nexus-crusher"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Nexus Crusher API",
        "version": __version__,
        "docs": "/docs",
    }


app.include_router(recommendations_router)
app.include_router(session_router)


@app.websocket("/ws/session")
async def websocket_session(websocket: WebSocket):
    """WebSocket endpoint streaming champion select events."""
    if not hasattr(app.state, "event_hub"):
        app.state.event_hub = SessionEventHub()
    await session_websocket(websocket, app.state.context, app.state.event_hub)
