"""Entrypoint do serviço.

Sobe o uvicorn com período de graça limitado no shutdown: requests em
voo têm SHUTDOWN_GRACE_SECONDS para terminar antes do fechamento forçado.
"""

from __future__ import annotations

import uvicorn

from tiktok_relay.config.settings import get_settings
from tiktok_relay.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.service_name, settings.log_format)
    logger.info(
        "server_starting",
        extra={"host": settings.host, "port": settings.port},
    )
    uvicorn.run(
        "tiktok_relay.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
        log_config=None,
    )


if __name__ == "__main__":
    main()
