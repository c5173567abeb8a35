"""CalcShare API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CalcShareError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Both collections loaded on startup and flushed once more on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Repositories, store and identity resolver placed on app.state by
      init_app_state so tests can install in-memory equivalents directly
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from calcshare.api.error_handlers import register_error_handlers
from calcshare.api.routes import auth, calculations, health
from calcshare.config import Settings, get_settings
from calcshare.core.repository_protocols import IdentityResolver, SnapshotStore
from calcshare.infrastructure.observability import setup_logging
from calcshare.infrastructure.snapshot_store import JsonFileSnapshotStore
from calcshare.services.identity import build_identity_resolver
from calcshare.services.record_repository import RecordRepository
from calcshare.services.user_repository import UserRepository

logger = logging.getLogger(__name__)


def init_app_state(
    app: FastAPI,
    settings: Settings,
    store: SnapshotStore | None = None,
    identity_resolver: IdentityResolver | None = None,
) -> None:
    """Wire store, repositories and identity resolver onto app.state."""
    store = store or JsonFileSnapshotStore(settings.data_dir)
    app.state.store = store
    app.state.records = RecordRepository(store, id_max_attempts=settings.id_max_attempts)
    app.state.users = UserRepository(store)
    app.state.identity_resolver = (
        identity_resolver or build_identity_resolver(settings.static_identities)
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_app_state(app, settings)
    record_count = await app.state.records.load()
    user_count = await app.state.users.load()
    logger.info(f"Data dir: {settings.data_dir}")
    logger.info(
        f"Loaded {record_count} existing calculations, {user_count} users",
        extra={"count": record_count},
    )
    logger.info("CalcShare API started")
    yield
    logger.info("CalcShare API shutting down")
    await app.state.records.flush()
    await app.state.users.flush()


app = FastAPI(
    title="CalcShare API", version="1.0.0", lifespan=lifespan,
)

# CORS: configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(calculations.router)
app.include_router(auth.router)

register_error_handlers(app)
