"""FastAPI application entry point for Shelf Access."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelf_access import __version__
from shelf_access.api.auth import get_orchestrator
from shelf_access.api.routes import router
from shelf_access.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting Shelf Access v{__version__}")
    settings = get_settings()
    logger.info(f"Debug mode: {settings.debug}")
    if not settings.admin_email:
        logger.warning("ADMIN_EMAIL not set; no session will have admin rights")

    orchestrator = get_orchestrator()
    state = await orchestrator.initialize()
    logger.info(f"Session check finished: {state.value}")

    yield

    # Shutdown
    await orchestrator.close()
    logger.info("Shutting down Shelf Access")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Raises:
        pydantic.ValidationError: If Supabase settings are missing
    """
    settings = get_settings()

    app = FastAPI(
        title="Shelf Access",
        description="Account approval and sign-in gate for the e-book shelf",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware for the shelf front end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "shelf_access.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
