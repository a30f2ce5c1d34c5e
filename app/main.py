"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc

from app.api.v1 import api_router
from app.core.config import get_settings
from app.core.errors import IntegrityError, ProgressTrackerError, StorageError
from app.core.logging import configure_logging
from app.db.session import engine

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: nothing to prepare (schema is managed by Alembic); shutdown: dispose the pool."""
    yield
    await engine.dispose()


def _error_body(exc: ProgressTrackerError) -> dict:
    return {"detail": exc.message, "error": type(exc).__name__}


async def domain_error_handler(request: Request, exc: ProgressTrackerError) -> JSONResponse:
    if isinstance(exc, IntegrityError):
        logger.error("Integrity violation on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc))


async def database_error_handler(request: Request, exc: sa_exc.DBAPIError) -> JSONResponse:
    """Driver errors that escaped the service layer (e.g. on commit)."""
    if isinstance(exc, sa_exc.IntegrityError):
        logger.exception("Integrity violation on %s %s", request.method, request.url.path)
        err: ProgressTrackerError = IntegrityError(str(exc.orig or exc))
    else:
        logger.warning("Storage failure on %s %s: %s", request.method, request.url.path, exc.orig or exc)
        err = StorageError(str(exc.orig or exc))
    return JSONResponse(status_code=err.status_code, content=_error_body(err))


def create_application() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow everything in debug, localhost in development, CORS_ORIGINS otherwise
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ProgressTrackerError, domain_error_handler)
    app.add_exception_handler(sa_exc.DBAPIError, database_error_handler)

    @app.get("/")
    def root():
        return {"status": "ok", "message": "Training Progress API"}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
