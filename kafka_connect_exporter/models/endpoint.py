from pydantic import BaseModel, ConfigDict, Field


class Endpoint(BaseModel):
    """
    One Kafka Connect REST API instance.

    ``base_url`` is used to build request URLs; ``instance`` is the value of the
    ``instance`` label on every metric line scraped from it.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        ...,
        description="Normalized base URL, no trailing slash",
    )

    instance: str = Field(
        ...,
        description="Base URL with the http:// or https:// prefix removed",
    )

    @classmethod
    def from_url(cls, url: str) -> "Endpoint":
        """Normalize a configured URL into an Endpoint."""
        base_url = url.strip().rstrip("/")
        # Schemes are case-insensitive; HTTP://host and http://host share a label.
        scheme, sep, rest = base_url.partition("://")
        instance = rest if sep and scheme.lower() in ("http", "https") else base_url
        return cls(base_url=base_url, instance=instance)

    def __str__(self) -> str:
        return self.base_url
