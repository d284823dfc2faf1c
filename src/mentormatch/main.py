"""FastAPI application factory and lifespan management."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mentormatch.config import settings
from mentormatch.db.engine import create_db_engine, create_session_factory
from mentormatch.events.connection_registry import ConnectionRegistry
from mentormatch.logging_config import configure_logging

# Configure logging at import time
_json_logs = os.environ.get("MENTORMATCH_LOCAL", "0") != "1"
configure_logging(log_level=settings.log_level, json_output=_json_logs)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    db_url = settings.effective_database_url
    engine = create_db_engine(db_url)

    # Auto-create tables for SQLite (local dev, no Alembic migrations)
    if "sqlite" in db_url:
        from mentormatch.db.base import Base
        import mentormatch.db.models  # noqa: F401 - register all ORM models

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("SQLite tables created (local mode)")

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)
    app.state.connection_registry = ConnectionRegistry(queue_size=settings.stream_queue_size)

    logger.info("MentorMatch API started (db=%s)", "sqlite" if "sqlite" in db_url else "postgresql")
    yield

    # Shutdown
    await engine.dispose()
    logger.info("MentorMatch API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="MentorMatch API",
        version="1.0.0",
        description="Student project mentorship: mentor suggestions, mentorship requests and milestone tracking.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add middleware (order matters: last added = first executed)
    from mentormatch.api.middleware.trace_id import TraceIdMiddleware
    from mentormatch.api.middleware.auth import AuthMiddleware
    app.add_middleware(AuthMiddleware)
    app.add_middleware(TraceIdMiddleware)

    # Register error handlers
    from mentormatch.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    # Import and mount routers
    from mentormatch.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
