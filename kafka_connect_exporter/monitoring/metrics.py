"""
Prometheus metrics describing the exporter itself.

These live on the default prometheus_client registry and are served at
/exporter/metrics, separate from the scraped Kafka Connect exposition.
"""
from prometheus_client import Counter, Gauge, Histogram

# Completed scrape cycles
kafka_connect_exporter_scrape_cycles_total = Counter(
    'kafka_connect_exporter_scrape_cycles_total',
    'Total number of completed scrape cycles',
)

# Per-endpoint scrape latency
kafka_connect_exporter_scrape_duration_seconds = Histogram(
    'kafka_connect_exporter_scrape_duration_seconds',
    'Time to scrape one Kafka Connect endpoint',
    ['instance'],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0)
)

# Upstream failures by operation and kind
kafka_connect_exporter_scrape_errors_total = Counter(
    'kafka_connect_exporter_scrape_errors_total',
    'Total number of failed Kafka Connect requests',
    ['instance', 'operation', 'error_type']
)

kafka_connect_exporter_last_scrape_timestamp_seconds = Gauge(
    'kafka_connect_exporter_last_scrape_timestamp_seconds',
    'Unix time the metrics cache was last refreshed',
)
