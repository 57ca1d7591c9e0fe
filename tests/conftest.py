"""
Pytest configuration and fixtures for Kafka Connect exporter tests.
"""
from typing import Any, Callable, Dict, List

import httpx
import pytest

from kafka_connect_exporter.models.endpoint import Endpoint


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeKafkaConnect:
    """
    In-memory Kafka Connect REST API keyed by ``host:port``.

    A cluster's ``connectors`` and each entry of ``statuses`` may be a JSON
    payload, an ``int`` HTTP status, a ``str`` raw body, or an exception class
    raised as a transport failure.
    """

    def __init__(self) -> None:
        self.clusters: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add_cluster(self, netloc: str, connectors: Any, statuses: Dict[str, Any] = None) -> None:
        self.clusters[netloc] = {"connectors": connectors, "statuses": statuses or {}}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        cluster = self.clusters.get(f"{request.url.host}:{request.url.port}")
        if cluster is None:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path == "/connectors":
            return self._respond(request, cluster["connectors"])
        if path.startswith("/connectors/") and path.endswith("/status"):
            name = path[len("/connectors/"):-len("/status")]
            if name not in cluster["statuses"]:
                return httpx.Response(404, json={"error_code": 404, "message": f"No status found for connector {name}"})
            return self._respond(request, cluster["statuses"][name])
        return httpx.Response(404, json={"error_code": 404, "message": "HTTP 404 Not Found"})

    @staticmethod
    def _respond(request: httpx.Request, behavior: Any) -> httpx.Response:
        if isinstance(behavior, type) and issubclass(behavior, httpx.TransportError):
            raise behavior("simulated failure", request=request)
        if isinstance(behavior, int):
            return httpx.Response(behavior, json={"error_code": behavior, "message": "simulated error"})
        if isinstance(behavior, str):
            return httpx.Response(200, text=behavior)
        return httpx.Response(200, json=behavior)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def connector_status(state: str, *task_states: str) -> Dict[str, Any]:
    """Build a status document the way Kafka Connect returns it."""
    return {
        "name": "ignored",
        "connector": {"state": state, "worker_id": "10.0.0.1:8083"},
        "tasks": [
            {"id": task_id, "state": task_state, "worker_id": "10.0.0.1:8083"}
            for task_id, task_state in enumerate(task_states)
        ],
        "type": "sink",
    }


@pytest.fixture
def fake_connect() -> FakeKafkaConnect:
    return FakeKafkaConnect()


@pytest.fixture
def status_factory() -> Callable[..., Dict[str, Any]]:
    return connector_status


@pytest.fixture
def endpoint() -> Endpoint:
    return Endpoint.from_url("http://connect-a:8083")
