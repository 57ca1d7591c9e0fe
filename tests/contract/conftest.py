"""
Fixtures for HTTP contract tests: an app wired to a fake Kafka Connect cluster.
"""
import pytest
from fastapi.testclient import TestClient

from kafka_connect_exporter.api.main import create_app
from kafka_connect_exporter.config.settings import Settings
from kafka_connect_exporter.monitoring.metrics_cache import MetricsCache
from kafka_connect_exporter.repositories.kafka_connect_repository import KafkaConnectRepository
from kafka_connect_exporter.services.scrape_coordinator import ScrapeCoordinator


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        connect_urls="http://connect-a:8083,http://connect-b:8083",
        scrape_interval_secs=3600,
    )


@pytest.fixture
def coordinator(settings: Settings, fake_connect) -> ScrapeCoordinator:
    repository = KafkaConnectRepository(transport=fake_connect.transport())
    repository.connect()
    return ScrapeCoordinator(
        repository=repository,
        endpoints=settings.endpoints,
        cache=MetricsCache(),
        interval_seconds=settings.scrape_interval_secs,
    )


@pytest.fixture
def client(settings: Settings, coordinator: ScrapeCoordinator, fake_connect, status_factory):
    fake_connect.add_cluster("connect-a:8083", {"orders-sink": {}}, {
        "orders-sink": status_factory("RUNNING", "RUNNING"),
    })
    app = create_app(settings=settings, coordinator=coordinator)
    with TestClient(app) as test_client:
        yield test_client
