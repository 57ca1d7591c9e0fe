"""FastAPI application serving Kafka Connect metrics."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from kafka_connect_exporter import __version__
from kafka_connect_exporter.api.routes import health, metrics
from kafka_connect_exporter.config.settings import Settings, get_settings
from kafka_connect_exporter.monitoring.metrics_cache import MetricsCache
from kafka_connect_exporter.repositories.kafka_connect_repository import KafkaConnectRepository
from kafka_connect_exporter.services.scrape_coordinator import ScrapeCoordinator

logger = structlog.get_logger(__name__)


def build_coordinator(settings: Settings) -> ScrapeCoordinator:
    """Wire the Kafka Connect client, cache and coordinator from settings."""
    repository = KafkaConnectRepository()
    repository.connect()

    return ScrapeCoordinator(
        repository=repository,
        endpoints=settings.endpoints,
        cache=MetricsCache(),
        interval_seconds=settings.scrape_interval_secs,
    )


def create_app(
    settings: Optional[Settings] = None,
    coordinator: Optional[ScrapeCoordinator] = None,
) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()
    coordinator = coordinator or build_coordinator(settings)

    app = FastAPI(
        title="Kafka Connect Exporter",
        description="Prometheus exporter for Kafka Connect connector and task status",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.metrics_cache = coordinator.cache

    # Exception handlers
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Internal server error",
                "detail": str(exc) if settings.environment == "development" else None,
            },
        )

    # Request logging middleware; scrapers hit /metrics every few seconds
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests."""
        logger.debug(
            "http_request",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )
        response = await call_next(request)
        logger.debug(
            "http_response",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        return response

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(metrics.router, tags=["metrics"])

    @app.on_event("startup")
    async def startup_event():
        """Populate the cache before the listener accepts traffic."""
        logger.info("kafka_connect_exporter_starting", version=__version__)
        await coordinator.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Stop polling and release the HTTP client."""
        logger.info("kafka_connect_exporter_shutting_down")
        await coordinator.stop()
        await coordinator.repository.close()

    return app
