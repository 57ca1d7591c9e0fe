from kafka_connect_exporter.models.endpoint import Endpoint
from kafka_connect_exporter.models.connector_status import (
    KNOWN_STATES,
    ConnectorInfo,
    ConnectorSnapshot,
    ConnectorState,
    ConnectorStatus,
    ScrapeResult,
    TaskStatus,
)

__all__ = [
    "Endpoint",
    "KNOWN_STATES",
    "ConnectorInfo",
    "ConnectorSnapshot",
    "ConnectorState",
    "ConnectorStatus",
    "ScrapeResult",
    "TaskStatus",
]
