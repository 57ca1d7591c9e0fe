"""
Configuration module using pydantic-settings for type-safe environment variable management.
"""
from functools import lru_cache
from typing import List, Tuple
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kafka_connect_exporter.models.endpoint import Endpoint


def split_connect_urls(raw: str) -> List[str]:
    """Split a comma-separated URL list, trimming entries and trailing slashes."""
    return [
        url.strip().rstrip("/")
        for url in raw.split(",")
        if url.strip().rstrip("/")
    ]


def split_bind_addr(bind_addr: str) -> Tuple[str, int]:
    """Split ``host:port`` (or ``[v6]:port``) into its parts."""
    host, sep, port = bind_addr.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"bind address must be host:port, got {bind_addr!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"bind port must be an integer, got {port!r}") from None
    if not 1 <= port_number <= 65535:
        raise ValueError(f"bind port must be between 1 and 65535, got {port_number}")
    return host, port_number


class Settings(BaseSettings):
    """Exporter settings, read once at process startup"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application settings
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Scrape settings
    connect_urls: str = Field(default="http://localhost:8083", validation_alias="KAFKA_CONNECT_URLS")
    bind_addr: str = Field(default="0.0.0.0:9407", validation_alias="BIND_ADDR")
    scrape_interval_secs: int = Field(default=30, gt=0, validation_alias="SCRAPE_INTERVAL_SECS")

    @field_validator("connect_urls")
    @classmethod
    def validate_connect_urls(cls, value: str) -> str:
        urls = split_connect_urls(value)
        if not urls:
            raise ValueError("at least one Kafka Connect URL is required")
        for url in urls:
            parts = urlsplit(url)
            if parts.scheme not in ("http", "https") or not parts.netloc:
                raise ValueError(f"invalid Kafka Connect URL: {url!r}")
        return value

    @field_validator("bind_addr")
    @classmethod
    def validate_bind_addr(cls, value: str) -> str:
        split_bind_addr(value)
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @property
    def endpoints(self) -> List[Endpoint]:
        """Configured Kafka Connect endpoints, in configured order."""
        return [Endpoint.from_url(url) for url in split_connect_urls(self.connect_urls)]

    @property
    def bind_host(self) -> str:
        return split_bind_addr(self.bind_addr)[0]

    @property
    def bind_port(self) -> int:
        return split_bind_addr(self.bind_addr)[1]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return Settings()
