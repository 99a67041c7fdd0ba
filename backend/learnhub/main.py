"""
LearnHub application entry point.

Builds the FastAPI application: storage wiring, error translation,
request logging and the API routers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from learnhub.core.config import settings
from learnhub.core.database import DatabaseManager, init_db
from learnhub.core.exceptions import LearnHubError
from learnhub.routers import api_router
from learnhub.storage import DatabaseStorage, Storage, get_storage


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


def _resolve_storage(app: FastAPI) -> Storage:
    override = app.dependency_overrides.get(get_storage)
    return override() if override else get_storage()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    storage = _resolve_storage(app)
    logger.info(f"Starting {settings.PROJECT_NAME} {settings.VERSION} with {type(storage).__name__}")

    if isinstance(storage, DatabaseStorage) and not app.dependency_overrides:
        DatabaseManager.create_all_tables()
    init_db(storage)

    yield

    logger.info("Shutting down application")


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        storage: Adapter to serve requests from instead of the configured one
    """
    configure_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        lifespan=lifespan,
    )

    if storage is not None:
        app.dependency_overrides[get_storage] = lambda: storage

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith(settings.API_PREFIX):
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms"
            )
        return response

    @app.exception_handler(LearnHubError)
    async def learnhub_error_handler(request: Request, exc: LearnHubError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})

        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", []) if loc != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        logger.warning(f"{request.method} {request.url.path} -> 400: {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run("learnhub.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
