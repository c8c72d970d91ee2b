"""
FastAPI Application - Social Rankings Service API
"""
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import ConfigurationError, ensure_credentials, settings
from services import RankingServices, build_services
from utils import logger, init_logging
from .routes import router


def create_app(services: Optional[RankingServices] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        services: prebuilt services. When omitted, the lifespan validates the
            configuration, builds them and starts the refresh scheduler.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        if services is not None:
            app.state.orchestrator = services.orchestrator
            yield
            return

        # Startup
        init_logging(app_name="api")
        ensure_credentials(settings)
        logger.info("Starting API server")

        owned = build_services(settings)
        app.state.orchestrator = owned.orchestrator
        owned.scheduler.start()

        try:
            await owned.token_provider.authenticate()
            logger.info("Initial authentication completed")
        except Exception as e:
            logger.error(f"Failed to initialize authentication: {e}")

        yield

        # Shutdown
        logger.info("Shutting down API server")
        owned.scheduler.stop()
        await owned.aclose()

    app = FastAPI(
        title="Social Rankings Service",
        description="Top users, latest posts and most commented posts from the social data API",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


def run_server():
    """Validate configuration and serve the API with uvicorn."""
    import uvicorn

    init_logging(app_name="api")

    try:
        ensure_credentials(settings)
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    uvicorn.run(create_app(), host=settings.API_HOST, port=settings.PORT)


if __name__ == "__main__":
    run_server()
