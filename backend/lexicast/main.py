"""
FastAPI application for the Lexicast API.

Startup configures logging and the database, then starts background tasks:
the refresh token sweep and, when enabled, an in-process transcoding worker.
Shutdown stops them before closing the queue connection and the engine.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from lexicast.config import Settings, configure_logging, get_settings
from lexicast.core import container
from lexicast.database import dispose_engine, initialize_database, session_scope
from lexicast.feature_flags import is_in_process_transcoding_enabled
from lexicast.infrastructure.common.exception_handlers import register_exception_handlers
from lexicast.infrastructure.common.rate_limit import limiter
from lexicast.infrastructure.identity.repositories import RefreshTokenRepository
from lexicast.infrastructure.identity.routers import auth, users
from lexicast.infrastructure.learning.routers import flashcard_groups, flashcards
from lexicast.infrastructure.podcast.routers import podcast_admin, podcasts
from lexicast.infrastructure.podcast.workers import TranscodingWorker
from lexicast.worker import build_worker

logger = structlog.get_logger(__name__)

SHUTDOWN_TIMEOUT_SECONDS = 30.0


def sweep_refresh_tokens() -> int:
    """Delete refresh tokens that expired more than the grace period ago."""
    with session_scope() as db:
        session_store = container.session_store(
            refresh_token_repository=RefreshTokenRepository(db)
        )
        return session_store.sweep()


async def _run_token_sweep(interval_minutes: int) -> None:
    while True:
        await asyncio.sleep(interval_minutes * 60)
        try:
            sweep_refresh_tokens()
        except SQLAlchemyError as e:
            logger.error("refresh_token_sweep_failed", error=str(e))


async def _stop_tasks(tasks: list[asyncio.Task[None]], worker: TranscodingWorker | None) -> None:
    if worker is not None:
        worker.stop()
    for task in tasks:
        if task.get_name() != "transcoding-worker":
            task.cancel()
    if not tasks:
        return
    _, pending = await asyncio.wait(tasks, timeout=SHUTDOWN_TIMEOUT_SECONDS)
    for task in pending:
        logger.warning("background_task_cancelled_on_shutdown", task=task.get_name())
        task.cancel()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.ENVIRONMENT)
        initialize_database(settings)

        tasks: list[asyncio.Task[None]] = []
        worker: TranscodingWorker | None = None

        interval = settings.REFRESH_TOKEN_SWEEP_INTERVAL_MINUTES
        if settings.ENVIRONMENT != "test" and interval > 0:
            tasks.append(
                asyncio.create_task(_run_token_sweep(interval), name="refresh-token-sweep")
            )

        if is_in_process_transcoding_enabled():
            worker = build_worker()
            tasks.append(asyncio.create_task(worker.run(), name="transcoding-worker"))

        logger.info(
            "application_started",
            environment=settings.ENVIRONMENT,
            background_tasks=[t.get_name() for t in tasks],
        )
        try:
            yield
        finally:
            await _stop_tasks(tasks, worker)
            await container.queue_connection().close()
            dispose_engine()
            logger.info("application_stopped")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(
        RateLimitExceeded,
        _rate_limit_exceeded_handler,  # type: ignore[arg-type]
    )
    register_exception_handlers(app)

    for router in (
        auth.router,
        users.router,
        flashcard_groups.router,
        flashcards.router,
        podcasts.router,
        podcast_admin.router,
    ):
        app.include_router(router, prefix=settings.API_PREFIX)

    settings.PUBLIC_ROOT.mkdir(parents=True, exist_ok=True)
    app.mount("/media", StaticFiles(directory=settings.PUBLIC_ROOT, check_dir=False), name="media")

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok", "version": settings.VERSION}

    return app


app = create_app()
