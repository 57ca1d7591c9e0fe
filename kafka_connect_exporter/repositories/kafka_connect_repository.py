import asyncio
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from kafka_connect_exporter.models.connector_status import ConnectorStatus
from kafka_connect_exporter.models.endpoint import Endpoint

# Overall deadline for every request, body included; a timeout counts as unreachable.
REQUEST_TIMEOUT_SECONDS = 10.0


class KafkaConnectError(Exception):
    """Could not obtain usable data from a Kafka Connect endpoint"""

    error_type = "error"

    def __init__(self, endpoint: Endpoint, message: str):
        super().__init__(message)
        self.endpoint = endpoint


class ConnectUnreachableError(KafkaConnectError):
    """Connection failure or timeout"""

    error_type = "unreachable"


class ConnectHTTPStatusError(KafkaConnectError):
    """Endpoint answered with a non-2xx status"""

    error_type = "http_status"

    def __init__(self, endpoint: Endpoint, message: str, status_code: int):
        super().__init__(endpoint, message)
        self.status_code = status_code


class ConnectDecodeError(KafkaConnectError):
    """Response body is not JSON or does not match the expected schema"""

    error_type = "decode"


class KafkaConnectRepository:
    """
    Read-only client for the Kafka Connect REST API.

    Holds no per-endpoint state; one instance serves every configured endpoint.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Kafka Connect repository.

        Args:
            client: Existing HTTP client to reuse (caller keeps ownership)
            timeout_seconds: Per-request timeout
            transport: Optional transport for the client created by connect()
        """
        self.timeout_seconds = timeout_seconds
        self.client = client
        self._transport = transport
        self._owns_client = client is None

    def connect(self) -> None:
        """Create the underlying HTTP client if one was not supplied."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
            self._owns_client = True

    async def close(self) -> None:
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None

    async def list_connectors(self, endpoint: Endpoint) -> List[str]:
        """
        List connector names on an endpoint.

        The request asks for inline status (``expand=status``) but only the key
        set of the returned object is used.

        Raises:
            KafkaConnectError: If the endpoint is unreachable or the body is not
                a JSON object
        """
        payload = await self._get_json(endpoint, f"{endpoint.base_url}/connectors?expand=status")
        if not isinstance(payload, dict):
            raise ConnectDecodeError(
                endpoint,
                f"expected a JSON object of connectors, got {type(payload).__name__}",
            )
        return list(payload.keys())

    async def get_connector_status(self, endpoint: Endpoint, name: str) -> ConnectorStatus:
        """
        Fetch and decode the status document of one connector.

        Raises:
            KafkaConnectError: If the request fails or the document is malformed
        """
        url = f"{endpoint.base_url}/connectors/{quote(name, safe='')}/status"
        payload = await self._get_json(endpoint, url)
        try:
            return ConnectorStatus.model_validate(payload)
        except ValidationError as e:
            raise ConnectDecodeError(endpoint, f"invalid status for {name}: {e}") from e

    async def _get_json(self, endpoint: Endpoint, url: str) -> Any:
        if self.client is None:
            self.connect()

        try:
            response = await asyncio.wait_for(self.client.get(url), self.timeout_seconds)
            response.raise_for_status()
        except asyncio.TimeoutError as e:
            raise ConnectUnreachableError(
                endpoint, f"GET {url} exceeded {self.timeout_seconds}s"
            ) from e
        except httpx.HTTPStatusError as e:
            raise ConnectHTTPStatusError(
                endpoint,
                f"GET {url} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ConnectUnreachableError(endpoint, f"GET {url} failed: {e!r}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ConnectDecodeError(endpoint, f"GET {url} returned invalid JSON: {e}") from e
