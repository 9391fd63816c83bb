"""
FastAPI application entry point for the Slidetrack API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from slidetrack import __version__
from slidetrack.api.errors import setup_error_handlers
from slidetrack.api.v1 import v1_router
from slidetrack.infra.config.database import get_engine, init_models
from slidetrack.infra.config.logging_config import get_logger, setup_logging
from slidetrack.infra.config.settings import get_settings
from slidetrack.infra.middleware.request_context import RequestContextMiddleware

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger = get_logger("app")
    logger.info(
        "app.startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    await init_models()

    yield

    # Shutdown
    await get_engine().dispose()
    logger.info("app.shutdown", app_name=settings.app_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Tracked slide-deck sharing: viewing sessions and engagement analytics",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request context + logging middleware
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    # Include routers
    app.include_router(v1_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Liveness probe."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": __version__,
        }

    return app


# Create FastAPI application
app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "slidetrack.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if not settings.debug else "debug",
    )


if __name__ == "__main__":
    run()
