"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vocalis import __version__
from vocalis.api.routes import auth, health, user
from vocalis.components.throttle import CommandThrottle
from vocalis.core.config import get_settings
from vocalis.core.database import init_db
from vocalis.core.gemini_client import GeminiClient
from vocalis.core.logging_config import LoggingConfig
from vocalis.core.middleware import LoggingContextMiddleware, MetricsMiddleware

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


def create_app(
    reasoning_client: Optional[GeminiClient] = None,
    command_throttle: Optional[CommandThrottle] = None,
    create_tables: bool = True,
) -> FastAPI:
    """
    Build the application

    Args:
        reasoning_client: Client for the reasoning endpoint (default: from settings)
        command_throttle: Per-session throttle (default: settings.command_min_interval_ms)
        create_tables: Create missing database tables on startup
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan events for FastAPI app"""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")
        if create_tables:
            init_db()

        owns_client = reasoning_client is None
        app.state.reasoning_client = reasoning_client or GeminiClient()
        app.state.command_throttle = command_throttle or CommandThrottle(
            min_interval_ms=settings.command_min_interval_ms
        )
        if not settings.gemini_api_url and owns_client:
            logger.warning("GEMINI_API_URL is not set; every command will get the fallback reply")

        yield

        logger.info(f"Shutting down {settings.app_name}...")
        if owns_client:
            await app.state.reasoning_client.close()

    app = FastAPI(
        title=settings.app_name,
        description="Voice assistant command interpretation API",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Report HTTP errors as {"message": ...}"""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to log all unhandled errors"""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            extra={
                "error_type": type(exc).__name__,
                "path": request.url.path,
                "method": request.method,
            }
        )
        return JSONResponse(status_code=500, content={"message": "Server error"})

    app.include_router(auth.router)
    app.include_router(user.router)
    app.include_router(health.router)

    @app.get("/api")
    async def root():
        """Root API endpoint"""
        return {
            "name": settings.app_name,
            "version": __version__,
            "status": "running",
            "environment": settings.app_env,
        }

    return app


app = create_app()
