import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api.api.router import api_router
from api.core.config import Settings, get_settings
from api.core.database import Database
from api.core.errors import register_error_handlers
from api.services.seed import seed_demo_data
from api.services.store import Store

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Each app owns its own database."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler for startup and shutdown.

        Creates the tables, seeds an empty store when enabled and disposes
        of the engine on shutdown.
        """
        # Startup
        database = Database(settings.database_url, echo=settings.database_echo)
        database.create_all()
        app.state.database = database
        if settings.seed_demo_data:
            with database.scoped_session() as db:
                seed_demo_data(Store(db))
        logger.info(f"{settings.app_name} started")
        yield
        # Shutdown
        database.dispose()
        logger.info(f"{settings.app_name} stopped")

    app = FastAPI(
        title=settings.app_name,
        description="Learning management REST API for admins, faculty and students",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/health", tags=["health"])
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    # Include API routes
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
