"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoicesense import __version__
from invoicesense.core.config import get_settings
from invoicesense.core.exceptions import register_exception_handlers
from invoicesense.core.health import router as health_router
from invoicesense.core.logging import configure_logging, get_logger
from invoicesense.core.middleware import RequestIdMiddleware
from invoicesense.features.analytics.routes import router as analytics_router
from invoicesense.features.clients.routes import router as clients_router
from invoicesense.features.datastore.dependencies import build_invoice_source
from invoicesense.features.reports.routes import router as reports_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown.

    Args:
        app: FastAPI application instance; the invoice source lives on its state.

    Yields:
        None after startup, closes the invoice source on shutdown.
    """
    settings = get_settings()

    # Startup
    configure_logging()
    logger.info("app.startup_started", version=__version__, debug=settings.debug)
    app.state.invoice_source = build_invoice_source(settings)

    yield

    # Shutdown
    await app.state.invoice_source.aclose()
    logger.info("app.shutdown_completed")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Invoice analytics dashboard and reporting API",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware (order matters - first added = outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    # Exception handlers
    register_exception_handlers(app)

    # Routers
    app.include_router(health_router)
    app.include_router(analytics_router)
    app.include_router(reports_router)
    app.include_router(clients_router)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured host and port.

    Uvicorn's own logging config is disabled so its loggers go through
    configure_logging. Auto-reload is on only for development with DEBUG set;
    production responses omit the Server header.
    """
    settings = get_settings()
    configure_logging()
    logger.info("app.serving", host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        "invoicesense.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development and settings.debug,
        log_config=None,
        server_header=not settings.is_production,
    )


if __name__ == "__main__":
    run()
