"""Scrape Coordinator service.

Polls every configured Kafka Connect endpoint on a fixed cadence and publishes
the rendered exposition to the metrics cache.
"""

import asyncio
import time
from typing import List, Optional

import structlog

from kafka_connect_exporter.models.connector_status import ConnectorSnapshot, ScrapeResult
from kafka_connect_exporter.models.endpoint import Endpoint
from kafka_connect_exporter.monitoring.metrics import (
    kafka_connect_exporter_last_scrape_timestamp_seconds,
    kafka_connect_exporter_scrape_cycles_total,
    kafka_connect_exporter_scrape_duration_seconds,
    kafka_connect_exporter_scrape_errors_total,
)
from kafka_connect_exporter.monitoring.metrics_cache import MetricsCache, MetricsSnapshot
from kafka_connect_exporter.repositories.kafka_connect_repository import (
    ConnectDecodeError,
    KafkaConnectError,
    KafkaConnectRepository,
)
from kafka_connect_exporter.services.metric_renderer import render_exposition

logger = structlog.get_logger(__name__)


class ScrapeCoordinator:
    """Runs scrape cycles over all endpoints and owns the polling loop.

    The loop is the cache's only writer. A cycle starts ``interval_seconds``
    after the previous one started, or immediately if that one overran.
    """

    def __init__(
        self,
        repository: KafkaConnectRepository,
        endpoints: List[Endpoint],
        cache: MetricsCache,
        interval_seconds: float = 30
    ):
        """Initialize scrape coordinator.

        Args:
            repository: Kafka Connect client shared by all endpoints
            endpoints: Endpoints to poll, in output order
            cache: Cache receiving each cycle's exposition
            interval_seconds: Period between cycle starts (default: 30)
        """
        self.repository = repository
        self.endpoints = list(endpoints)
        self.cache = cache
        self.interval_seconds = interval_seconds

        self._task: Optional[asyncio.Task] = None
        self._last_cycle_started: Optional[float] = None

    async def start(self) -> None:
        """Run one cycle, then keep polling in a background task."""
        if self.is_running():
            logger.warning("scrape_loop_already_running")
            return

        await self.refresh()
        self._task = asyncio.create_task(self._run_loop())

        logger.info(
            "scrape_loop_started",
            interval_seconds=self.interval_seconds,
            endpoints=[endpoint.base_url for endpoint in self.endpoints],
        )

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

        logger.info("scrape_loop_stopped")

    def is_running(self) -> bool:
        """Check if the background loop is active.

        Returns:
            True if the loop task exists and has not finished
        """
        return self._task is not None and not self._task.done()

    async def refresh(self) -> MetricsSnapshot:
        """Run one full scrape cycle and replace the cache contents."""
        self._last_cycle_started = time.monotonic()

        exposition = await self.scrape_all()
        snapshot = self.cache.replace(exposition)

        kafka_connect_exporter_scrape_cycles_total.inc()
        kafka_connect_exporter_last_scrape_timestamp_seconds.set(snapshot.updated_at)
        logger.debug(
            "scrape_cycle_completed",
            generation=snapshot.generation,
            duration_seconds=round(time.monotonic() - self._last_cycle_started, 3),
        )
        return snapshot

    async def scrape_all(self) -> str:
        """Scrape every endpoint and render one exposition, in configured order."""
        results = await asyncio.gather(
            *(self.scrape_endpoint(endpoint) for endpoint in self.endpoints),
            return_exceptions=True,
        )
        # Every endpoint has finished by now; only then surface the first failure.
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return render_exposition(results)

    async def scrape_endpoint(self, endpoint: Endpoint) -> ScrapeResult:
        """Collect the status of every connector on one endpoint.

        A failed list call makes the whole endpoint unreachable for this cycle;
        a failed status call only drops that connector.
        """
        start_time = time.monotonic()
        try:
            return await self._scrape_endpoint(endpoint)
        finally:
            kafka_connect_exporter_scrape_duration_seconds.labels(
                instance=endpoint.instance
            ).observe(time.monotonic() - start_time)

    async def _scrape_endpoint(self, endpoint: Endpoint) -> ScrapeResult:
        try:
            names = await self.repository.list_connectors(endpoint)
        except KafkaConnectError as e:
            self._record_error(endpoint, "list_connectors", e)
            logger.warning(
                "connect_endpoint_decode_failed"
                if isinstance(e, ConnectDecodeError)
                else "connect_endpoint_unreachable",
                instance=endpoint.instance,
                error_type=e.error_type,
                error=str(e),
            )
            return ScrapeResult.unreachable(endpoint)

        connectors: List[ConnectorSnapshot] = []
        for name in names:
            try:
                status = await self.repository.get_connector_status(endpoint, name)
            except KafkaConnectError as e:
                self._record_error(endpoint, "connector_status", e)
                logger.warning(
                    "connector_status_fetch_failed",
                    instance=endpoint.instance,
                    connector=name,
                    error_type=e.error_type,
                    error=str(e),
                )
                status = None
            connectors.append(ConnectorSnapshot(name=name, status=status))

        return ScrapeResult(endpoint=endpoint, reachable=True, connectors=connectors)

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self.seconds_until_next_cycle())
            try:
                await self.refresh()
            except Exception as e:
                # Keep serving the previous exposition; the next cycle retries
                logger.error("scrape_cycle_failed", error=str(e), exc_info=True)

    def seconds_until_next_cycle(self, now: Optional[float] = None) -> float:
        """Delay before the next cycle may start; zero when the last one overran."""
        if self._last_cycle_started is None:
            return 0.0
        if now is None:
            now = time.monotonic()
        return max(0.0, self._last_cycle_started + self.interval_seconds - now)

    @staticmethod
    def _record_error(endpoint: Endpoint, operation: str, error: KafkaConnectError) -> None:
        kafka_connect_exporter_scrape_errors_total.labels(
            instance=endpoint.instance,
            operation=operation,
            error_type=error.error_type,
        ).inc()
