"""FastAPI app factory.

Endpoints are intentionally thin wrappers over :class:`Inspector`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stc_inspector import __version__
from stc_inspector.backends.memory import (
    MemoryEventLog,
    MemoryProgramStore,
    MemorySchedulerRegistry,
)
from stc_inspector.config import InspectorSettings
from stc_inspector.inspector import Inspector
from stc_inspector.seeds import seed_demo
from stc_inspector.server.config import ServerSettings
from stc_inspector.server.pager_store import PagerStore
from stc_inspector.server.router import router as dashboard_router

logger = logging.getLogger(__name__)


def _default_inspector(
    settings: ServerSettings, inspector_settings: InspectorSettings
) -> Inspector:
    # Without real backends the app runs on empty in-memory stores (optionally seeded).
    event_log = MemoryEventLog()
    program_store = MemoryProgramStore()
    if settings.seed_demo:
        seed_demo(event_log, program_store)
    else:
        logger.info("No backends supplied; serving empty in-memory stores")
    return Inspector(
        event_log,
        program_store,
        schedulers=MemorySchedulerRegistry(),
        settings=inspector_settings,
    )


def create_app(inspector: Inspector | None = None) -> FastAPI:
    settings = ServerSettings()
    if inspector is None:
        inspector = _default_inspector(settings, InspectorSettings())

    app = FastAPI(
        title="STC Inspector",
        version=__version__,
        description="Read-only JSON API over the STC event log and program store.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.inspector = inspector
    app.state.pagers = PagerStore(max_sessions=settings.max_pager_sessions)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(dashboard_router, prefix="/api")
    return app
