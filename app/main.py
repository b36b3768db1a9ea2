from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.realtime import router as realtime_router
from app.api.v1.router import router as api_v1_router
from app.config.settings import settings
from app.core.exception_handlers import register_exception_handlers
from app.core.logging import get_logger
from app.core.middleware import register_middlewares
from app.db.init_db import init_db

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the versioned API router under /api/v1 and the admin
      WebSocket channel under /ws.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS Configuration
    if settings.CORS_ORIGINS and settings.CORS_ORIGINS != ["*"]:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        # Permissive for development; tighten in production
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Register shared core middlewares (request ID, timing, etc.)
    register_middlewares(app)
    register_exception_handlers(app)

    # Mount API v1 under /api/v1
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)
    app.include_router(realtime_router, tags=["Realtime"])

    @app.get("/health", tags=["System Health"])
    async def health_check():
        return {
            "success": True,
            "message": "Hotel Reservation API is running",
            "environment": settings.ENVIRONMENT,
            "version": settings.API_VERSION,
        }

    # Creates tables and seeds the first admin; production schemas are managed outside the app
    @app.on_event("startup")
    async def on_startup() -> None:
        if settings.ENVIRONMENT != "production":
            init_db()
        logger.info("Application started", extra={"environment": settings.ENVIRONMENT})

    return app


app = create_app()
