"""Medição de latência dos estágios que fazem chamadas externas."""

from __future__ import annotations

import contextlib
import time
from collections.abc import Iterator

from tiktok_relay.observability.logging import get_logger

logger = get_logger(__name__)


@contextlib.contextmanager
def timed(component: str) -> Iterator[None]:
    """Loga `component_latency` ao sair do bloco, mesmo em caso de erro.

    Exemplo:
        with timed("video_resolver"):
            media_url = await resolver.resolve(link)

    Campos: component, elapsed_ms e succeeded (False se o bloco levantou,
    inclusive por cancelamento).
    """
    start = time.perf_counter()
    succeeded = False
    try:
        yield
        succeeded = True
    finally:
        logger.info(
            "component_latency",
            extra={
                "component": component,
                "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                "succeeded": succeeded,
            },
        )
