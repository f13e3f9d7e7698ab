"""
FastAPI application for the action history service.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from util.logging import logger
from ..core import scheduler
from ..core.access import AccessGuard
from ..core.config import RetentionConfig, VERSION, load_config, validate_config
from ..core.db import health_check
from ..core.errors import (
    PROBLEM_MEDIA_TYPE,
    Forbidden,
    HistoryError,
    Unauthenticated,
    problem,
)
from ..core.query import QueryEngine, utc_now
from ..core.retention import RetentionSweeper
from ..core.store import SqliteActionStore, Store
from .actions import router as actions_router
from .schemas import HealthResponse

SWEEP_TASK = "retention_sweep"
X_REQUEST_ID = "X-Request-Id"
INTERNAL_ERROR_DETAIL = "Internal server error"


def _problem_response(status: int, title: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=problem(status, title, detail),
        media_type=PROBLEM_MEDIA_TYPE,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: RetentionConfig = app.state.config

    issues = validate_config(config)
    if issues:
        raise RuntimeError(f"History configuration invalid: {issues}")

    app.state.store.initialize()

    sweep_loop = None
    if config.sweep_enabled:
        scheduler.register_task(SWEEP_TASK, config.delete_schedule, app.state.sweeper.sweep_all)
        sweep_loop = asyncio.create_task(scheduler.start())

    yield

    if sweep_loop is not None:
        scheduler.stop()
        await sweep_loop
        scheduler.unregister_task(SWEEP_TASK)


def create_app(config: Optional[RetentionConfig] = None,
               store: Optional[Store] = None,
               clock: Callable[[], datetime] = utc_now) -> FastAPI:
    """Build the application with its engine components wired to one store."""
    config = config or load_config()
    store = store or SqliteActionStore(config.db_path)

    app = FastAPI(
        title="Action History API",
        version=VERSION,
        description="Per-user action history with time-windowed listing and retention",
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.store = store
    app.state.guard = AccessGuard()
    app.state.engine = QueryEngine(store, config, clock=clock)
    app.state.sweeper = RetentionSweeper(store, config, clock=clock)

    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        request_id = request.headers.get(X_REQUEST_ID)
        path = request.url.path
        log_this = config.log_requests and path not in config.log_exclude_paths

        if log_this:
            logger.log_request(request.method, path, request_id)
        start_time = time.monotonic()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error_log(request_id, f"Unhandled exception: {e}")
            detail = str(e) if config.debug else INTERNAL_ERROR_DETAIL
            response = _problem_response(500, "Internal Server Error", detail)

        if request_id:
            response.headers[X_REQUEST_ID] = request_id
        if log_this:
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.log_response(request.method, path, response.status_code, duration_ms, request_id)
        return response

    @app.exception_handler(HistoryError)
    async def history_error_handler(request: Request, exc: HistoryError):
        if isinstance(exc, (Unauthenticated, Forbidden)):
            logger.log_access_denied(
                exc.detail,
                requested_user_id=request.path_params.get("user_id"),
                request_id=request.headers.get(X_REQUEST_ID),
            )
        detail = exc.detail
        if exc.status >= 500:
            logger.error_log(request.headers.get(X_REQUEST_ID), detail)
            if not config.debug:
                detail = INTERNAL_ERROR_DETAIL
        return _problem_response(exc.status, exc.title, detail)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(
            ".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()
        )
        return _problem_response(400, "Bad Request", f"Invalid request parameters: {fields}")

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint():
        """Check store health."""
        db_health = health_check(config.db_path)
        return HealthResponse(
            status="healthy" if db_health else "unhealthy",
            version=VERSION,
            db_health=db_health,
            save_interval=config.save_interval,
        )

    app.include_router(actions_router, prefix="/v1/actions", tags=["actions"])

    return app


app = create_app()
