"""FastAPI application with event and check-in endpoints."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from estate_checkin import __version__
from estate_checkin.checkin.routes import router as checkin_router
from estate_checkin.events.routes import router as events_router
from estate_checkin.logging_config import setup_logging
from estate_checkin.metrics import router as metrics_router
from estate_checkin.participants.routes import router as participants_router
from estate_checkin.properties.routes import router as properties_router
from estate_checkin.schemas import utcnow
from estate_checkin.settings import Settings, settings as default_settings
from estate_checkin.store import Store, build_store

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    clock: Callable[[], datetime] = utcnow,
) -> FastAPI:
    """
    Build the application.

    The store is created at startup from ``settings`` unless one is
    passed in, and closed at shutdown.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} {__version__}")
        app.state.store = store or build_store(settings)
        yield
        logger.info("Shutting down")
        app.state.store.close()

    app = FastAPI(
        title=settings.app_name,
        description="Real-estate events with geolocated QR check-in",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Observability
    app.include_router(metrics_router)  # exposes GET /metrics

    # Functional routers
    app.include_router(events_router)
    app.include_router(checkin_router)
    app.include_router(participants_router)
    app.include_router(properties_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": __version__}

    return app


setup_logging(default_settings.log_level)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
