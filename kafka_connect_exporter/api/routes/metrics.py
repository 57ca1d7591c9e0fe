"""Prometheus metrics endpoints."""

from fastapi import APIRouter, Depends, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
import structlog

from kafka_connect_exporter.monitoring.metrics_cache import MetricsCache

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_metrics_cache(request: Request) -> MetricsCache:
    """Cache shared with the scrape coordinator."""
    return request.app.state.metrics_cache


@router.get("/metrics")
async def metrics(cache: MetricsCache = Depends(get_metrics_cache)):
    """
    Kafka Connect metrics endpoint.

    Serves the exposition produced by the most recent scrape cycle. Never
    triggers a scrape itself.
    """
    snapshot = cache.snapshot()
    logger.debug("metrics_requested", generation=snapshot.generation)

    return Response(content=snapshot.text, media_type=CONTENT_TYPE_LATEST)


@router.get("/exporter/metrics")
async def exporter_metrics():
    """
    Exporter self-instrumentation.

    Scrape cycle counts, per-endpoint latency and upstream error counters from
    the default prometheus_client registry.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
