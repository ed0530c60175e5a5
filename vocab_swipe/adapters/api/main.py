# vocab_swipe/adapters/api/main.py
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vocab_swipe import __version__
from vocab_swipe.shared.config import settings, AppEnv
from vocab_swipe.shared.container import container
from vocab_swipe.shared.logging_config import configure_logging
from vocab_swipe.shared.telemetry import instrument_fastapi, setup_telemetry, shutdown_telemetry

# Import Routers
from vocab_swipe.adapters.api.routers import health, sources, study

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application Lifecycle Manager.
    1. Startup: telemetry, eager load of progress state.
    2. Shutdown: closes the remote source client, if any, and flushes spans.
    """
    setup_telemetry(settings.OTEL_SERVICE_NAME)
    logger.info("app_startup", app=settings.APP_NAME, env=settings.APP_ENV.value, storage=settings.STORAGE_BACKEND.value)

    # Progress is read once here instead of on the first swipe
    container.progress_tracker()

    yield

    logger.info("app_shutdown")
    repo = container.source_repository()
    if hasattr(repo, "aclose"):
        await repo.aclose()
    shutdown_telemetry()


def _error_body(code: int, message) -> dict:
    try:
        label = HTTPStatus(code).phrase
    except ValueError:
        label = "Error"
    return {"success": False, "error": label, "message": message}


def create_app() -> FastAPI:
    """Factory function to create the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="Vocab Swipe",
        version=__version__,
        description="Vocabulary flashcards: sources, progress and word selection",
        docs_url="/docs" if settings.APP_ENV != AppEnv.PRODUCTION else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Routes resolve their use cases through the container
    container.wire(modules=["vocab_swipe.adapters.api.dependencies"])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    instrument_fastapi(app)

    # Global Exception Handlers

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Keeps the `{success: false, ...}` envelope for every HTTP error."""
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(400, message))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Unhandled errors: logged with traceback, message hidden outside DEBUG."""
        logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(500, str(exc) if settings.DEBUG else "Internal Server Error"),
        )

    # Register Routers
    app.include_router(health.router)
    app.include_router(sources.router)
    app.include_router(study.router)

    return app


# Entry point for local debugging (e.g. `python -m vocab_swipe.adapters.api.main`)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "vocab_swipe.adapters.api.main:create_app",
        host="0.0.0.0",
        port=8080,
        reload=True,
        factory=True,
    )
