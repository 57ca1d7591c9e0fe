"""Process entry point: load settings, configure logging, serve HTTP."""
import sys

import uvicorn
from pydantic import ValidationError

from kafka_connect_exporter.api.main import create_app
from kafka_connect_exporter.config.logging_config import configure_logging, get_logger
from kafka_connect_exporter.config.settings import get_settings


def main() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        sys.exit(f"kafka-connect-exporter: invalid configuration: {errors}")

    configure_logging(settings.log_level)
    logger = get_logger("kafka_connect_exporter")

    app = create_app(settings)

    logger.info(
        "exporter_listening",
        bind_addr=settings.bind_addr,
        endpoints=[endpoint.base_url for endpoint in settings.endpoints],
    )

    # uvicorn exits non-zero if the address cannot be bound
    uvicorn.run(
        app,
        host=settings.bind_host,
        port=settings.bind_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
