"""
Shared cache holding the most recent Prometheus exposition.

The scrape coordinator is the only writer and replaces the whole value once per
cycle; HTTP handlers read it concurrently. Values are immutable snapshots, so a
reader holds either the previous cycle's text or the new one, never a mix.
"""
import threading
import time
from dataclasses import dataclass


@dataclass(frozen=True)
class MetricsSnapshot:
    """One complete exposition and when it was produced"""
    text: str
    generation: int
    updated_at: float


class MetricsCache:
    """Single-writer, multi-reader holder for the current MetricsSnapshot"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = MetricsSnapshot(text="", generation=0, updated_at=0.0)

    def get(self) -> str:
        """Return the current exposition text (empty before the first scrape)."""
        return self.snapshot().text

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return self._snapshot

    def replace(self, text: str) -> MetricsSnapshot:
        """
        Swap in a new exposition.

        Args:
            text: Full exposition for one scrape cycle

        Returns:
            The snapshot now being served
        """
        with self._lock:
            self._snapshot = MetricsSnapshot(
                text=text,
                generation=self._snapshot.generation + 1,
                updated_at=time.time(),
            )
            return self._snapshot
