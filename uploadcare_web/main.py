"""
FastAPI application entry point.

Serves uploader snippets and the group endpoints. Applications that
only need the view helpers and mount registry can import those
packages directly and never start this app.

For local development:
    uvicorn uploadcare_web.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.routes import groups, health, uploader
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration problems at startup; keep serving regardless."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info(
        "Uploadcare web integration starting",
        extra={
            "version": __version__,
            "mock_mode": settings.api_mock_mode,
            "store_files_async": settings.store_files_async,
            "do_not_store": settings.do_not_store,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("Uploadcare web integration shutting down")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="""
        Uploadcare File Uploader snippets and file-group helpers.

        - `GET /uploader/include`: script and stylesheet tags
        - `GET /uploader/field`: uploader bound to a hidden form field
        - `GET /api/v1/groups/resolve`: classify and resolve a stored group value
        - `POST /api/v1/groups/{group_id}/store`: store a group (requires `X-API-Key`)
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        uploader.router,
        prefix="/uploader",
        tags=["Uploader"],
    )

    app.include_router(
        groups.router,
        prefix="/api/v1/groups",
        tags=["Groups"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": settings.api_title,
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Log the full error server-side, return a generic 500."""
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error."}
        )

    logger.info(
        "FastAPI application created",
        extra={"title": settings.api_title, "version": __version__}
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "uploadcare_web.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
