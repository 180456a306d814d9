import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from heatloss import __version__
from heatloss.app.config import Settings, get_settings, setup_logging
from heatloss.app.middleware.error_handler import register_error_handlers
from heatloss.app.routes import heat_loss, radiators
from heatloss.services.heat_loss_service import HeatLossService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.debug)

    app = FastAPI(
        title="Heat Loss API",
        version=__version__,
        description="Room-by-room EN 12831 heat loss with calculation provenance"
    )
    app.state.settings = settings
    app.state.heat_loss_service = HeatLossService(
        max_workers=settings.max_workers,
        strict_validation=settings.strict_validation,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"REQUEST: {request.method} {request.url.path}")
        response = await call_next(request)
        logger.info(f"RESPONSE: {response.status_code}")
        return response

    register_error_handlers(app, settings.debug)

    app.include_router(heat_loss.router, prefix="/api/v1/heat-loss")
    app.include_router(radiators.router, prefix="/api/v1/radiators")

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/healthz")
    async def healthz():
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "heatloss-api",
            "version": __version__,
        }

    return app


app = create_app()
