"""Prometheus text rendering of Kafka Connect scrape results.

Pure functions: no I/O, no shared state. Metric and label names are part of the
exporter's public contract and must not change.
"""

from typing import Iterable, List, Sequence, Tuple, Union

from kafka_connect_exporter.models.connector_status import KNOWN_STATES, ScrapeResult

CONNECTOR_STATE = "kafka_connect_connector_state"
TASK_STATE = "kafka_connect_connector_task_state"
UP = "kafka_connect_up"
CONNECTORS_TOTAL = "kafka_connect_connectors_total"
CONNECTORS_RUNNING = "kafka_connect_connectors_running"
CONNECTORS_FAILED = "kafka_connect_connectors_failed"


def escape_label_value(value: str) -> str:
    """Escape a label value per the Prometheus text format."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_sample(
    metric_name: str,
    labels: Sequence[Tuple[str, str]],
    value: Union[int, float]
) -> str:
    """Format one ``name{label="value",...} value`` line.

    Args:
        metric_name: Metric name
        labels: Label name/value pairs, in output order
        value: Sample value

    Returns:
        Exposition line without trailing newline
    """
    rendered = ",".join(f'{name}="{escape_label_value(str(v))}"' for name, v in labels)
    return f"{metric_name}{{{rendered}}} {value}"


def render_endpoint(result: ScrapeResult) -> List[str]:
    """Render the exposition lines for one endpoint.

    An unreachable endpoint yields only ``kafka_connect_up 0``. A reachable one
    yields four one-hot state lines per connector and per task, then the four
    summary lines. A state outside the known set renders as all zeros.
    """
    instance = result.endpoint.instance

    if not result.reachable:
        return [format_sample(UP, [("instance", instance)], 0)]

    lines: List[str] = []

    for snapshot in result.connectors:
        # Status fetch failed: counted in total only
        if snapshot.status is None:
            continue

        connector_state = snapshot.status.state
        for state in KNOWN_STATES:
            lines.append(format_sample(
                CONNECTOR_STATE,
                [("connector", snapshot.name), ("state", state), ("instance", instance)],
                1 if connector_state == state else 0,
            ))

        for task in snapshot.status.tasks:
            for state in KNOWN_STATES:
                lines.append(format_sample(
                    TASK_STATE,
                    [
                        ("connector", snapshot.name),
                        ("task", str(task.id)),
                        ("state", state),
                        ("instance", instance),
                    ],
                    1 if task.state == state else 0,
                ))

    lines.append(format_sample(UP, [("instance", instance)], 1))
    lines.append(format_sample(CONNECTORS_TOTAL, [("instance", instance)], result.total))
    lines.append(format_sample(CONNECTORS_RUNNING, [("instance", instance)], result.running_count))
    lines.append(format_sample(CONNECTORS_FAILED, [("instance", instance)], result.failed_count))

    return lines


def render_exposition(results: Iterable[ScrapeResult]) -> str:
    """Concatenate every endpoint's lines, in order, into one exposition."""
    lines: List[str] = []
    for result in results:
        lines.extend(render_endpoint(result))

    if not lines:
        return ""
    return "\n".join(lines) + "\n"
