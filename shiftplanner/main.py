"""FastAPI main application for running and controlling shift optimizations."""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .logger import configure_logging
from .routes import optimization_router, schedule_router, status_router
from .services.singleton import reset_optimization_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Stop the background worker thread
    reset_optimization_service()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (read from the environment when None)

    Returns:
        Configured FastAPI app
    """
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    app = FastAPI(title="Shift Planner Optimization API", version="1.0.0", lifespan=lifespan)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": "Shift Planner Optimization API", "status": "running"}

    app.include_router(optimization_router)
    app.include_router(status_router)
    app.include_router(schedule_router)

    logger.info("Shift Planner API initialized")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
