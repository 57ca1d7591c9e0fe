from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from kafka_connect_exporter.models.endpoint import Endpoint


class ConnectorState(str, Enum):
    """Run states reported by Kafka Connect for connectors and tasks."""

    RUNNING = "running"
    FAILED = "failed"
    PAUSED = "paused"
    UNASSIGNED = "unassigned"


# Order of the one-hot state lines in the exposition.
KNOWN_STATES = tuple(state.value for state in ConnectorState)


class ConnectorInfo(BaseModel):
    """The ``connector`` block of a status document."""

    state: str = Field(..., description="Connector state, lowercased")

    @field_validator("state")
    @classmethod
    def normalize_state(cls, value: str) -> str:
        return value.lower()


class TaskStatus(BaseModel):
    """One entry of the ``tasks`` array of a status document."""

    id: int = Field(..., ge=0, description="Task id, unique within its connector")

    state: str = Field(..., description="Task state, lowercased")

    @field_validator("state")
    @classmethod
    def normalize_state(cls, value: str) -> str:
        return value.lower()


class ConnectorStatus(BaseModel):
    """
    Decoded ``GET /connectors/{name}/status`` response.

    Fields Kafka Connect sends besides ``connector.state`` and ``tasks[].id/state``
    (worker_id, type, trace) are ignored.
    """

    connector: ConnectorInfo

    tasks: List[TaskStatus]

    @property
    def state(self) -> str:
        return self.connector.state


class ConnectorSnapshot(BaseModel):
    """A connector name and its status, or None when the status fetch failed."""

    name: str

    status: Optional[ConnectorStatus] = None


class ScrapeResult(BaseModel):
    """
    Outcome of scraping one endpoint for one cycle.

    An unreachable result carries no connectors. For a reachable one, ``total``
    counts every listed connector, including those whose status fetch failed.
    """

    endpoint: Endpoint

    reachable: bool

    connectors: List[ConnectorSnapshot] = Field(default_factory=list)

    @classmethod
    def unreachable(cls, endpoint: Endpoint) -> "ScrapeResult":
        return cls(endpoint=endpoint, reachable=False)

    @property
    def total(self) -> int:
        return len(self.connectors)

    @property
    def running_count(self) -> int:
        return self._count_state(ConnectorState.RUNNING)

    @property
    def failed_count(self) -> int:
        return self._count_state(ConnectorState.FAILED)

    def _count_state(self, state: ConnectorState) -> int:
        return sum(
            1
            for snapshot in self.connectors
            if snapshot.status is not None and snapshot.status.state == state.value
        )

    def __repr__(self) -> str:
        return (
            f"ScrapeResult(instance={self.endpoint.instance}, "
            f"reachable={self.reachable}, "
            f"total={self.total})"
        )
