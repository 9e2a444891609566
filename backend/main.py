"""
Nudge - Main Application Entry Point

Adaptive check-in notifications delivered over Web Push.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nudge.core.config import get_settings
from nudge.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting Nudge in {settings.ENVIRONMENT} mode...")

    from nudge.infrastructure.local.database import init_db

    await init_db()

    # Start background scheduler for the per-minute delivery pass
    from nudge.services.background_scheduler import (
        start_background_scheduler,
        stop_background_scheduler,
    )

    await start_background_scheduler()

    yield

    # Shutdown
    logger.info("Shutting down Nudge...")
    await stop_background_scheduler()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Nudge",
        description="Adaptive check-in notifications over Web Push",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from nudge.api import (
        completions,
        notifications,
        push_subscriptions,
        reminders,
        schedules,
    )

    app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
    app.include_router(push_subscriptions.router, prefix="/api/push-subscription", tags=["push_subscriptions"])
    app.include_router(schedules.router, prefix="/api/schedules", tags=["schedules"])
    app.include_router(completions.router, prefix="/api/completions", tags=["completions"])
    app.include_router(reminders.router, prefix="/api/reminders", tags=["reminders"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "vapid_configured": settings.vapid_configured,
            "version": "0.1.0"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
