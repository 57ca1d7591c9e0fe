"""Prometheus exporter for Kafka Connect connector and task status."""

__version__ = "1.0.0"
