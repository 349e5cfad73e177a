"""Pipeline de processamento do webhook.

Ordem estrita dos estágios:
    normalizer → content_filter → link extractor → video_resolver → media_relay

Qualquer estágio pode abandonar o processamento. Falhas nunca sobem
para a borda HTTP: são logadas e convertidas em PipelineOutcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from tiktok_relay.adapters.webhook.normalizer import normalize
from tiktok_relay.config.settings import DEFAULT_CAPTION_PREFIX
from tiktok_relay.domain import content_filter, links
from tiktok_relay.domain.errors import (
    ConfigurationMissingError,
    FilteredOutError,
    MalformedPayloadError,
    NoLinkFoundError,
    RelayFailedError,
    RelayPipelineError,
    ResolutionFailedError,
)
from tiktok_relay.domain.models import CanonicalMessage
from tiktok_relay.observability.logging import get_logger
from tiktok_relay.observability.timing import timed

logger = get_logger(__name__)


class PipelineOutcome(str, Enum):
    """Resultado final do processamento (apenas para logs e testes)."""

    RELAYED = "relayed"
    MALFORMED_PAYLOAD = "malformed_payload"
    FILTERED_OUT = "filtered_out"
    NO_LINK = "no_link"
    CONFIGURATION_MISSING = "configuration_missing"
    RESOLUTION_FAILED = "resolution_failed"
    NO_RECIPIENT = "no_recipient"
    RELAY_FAILED = "relay_failed"
    UNEXPECTED_ERROR = "unexpected_error"


_OUTCOME_BY_ERROR: tuple[tuple[type[RelayPipelineError], PipelineOutcome], ...] = (
    (MalformedPayloadError, PipelineOutcome.MALFORMED_PAYLOAD),
    (FilteredOutError, PipelineOutcome.FILTERED_OUT),
    (NoLinkFoundError, PipelineOutcome.NO_LINK),
    (ConfigurationMissingError, PipelineOutcome.CONFIGURATION_MISSING),
    (ResolutionFailedError, PipelineOutcome.RESOLUTION_FAILED),
    (RelayFailedError, PipelineOutcome.RELAY_FAILED),
)


class VideoResolverPort(Protocol):
    async def resolve(self, video_url: str) -> str: ...


class MediaRelayPort(Protocol):
    async def send_media(self, recipient: str, media_url: str, caption: str) -> None: ...


@dataclass(frozen=True)
class PipelineConfig:
    """Parâmetros imutáveis do pipeline, definidos no startup."""

    expected_session: str = ""
    caption_prefix: str = DEFAULT_CAPTION_PREFIX


def build_caption(prefix: str, source_url: str) -> str:
    return prefix + source_url


def _outcome_for(exc: RelayPipelineError) -> PipelineOutcome:
    for error_type, outcome in _OUTCOME_BY_ERROR:
        if isinstance(exc, error_type):
            return outcome
    return PipelineOutcome.UNEXPECTED_ERROR


class WebhookPipeline:
    """Compõe os estágios do webhook em sequência estrita."""

    def __init__(
        self,
        config: PipelineConfig,
        resolver: VideoResolverPort,
        relay: MediaRelayPort,
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._relay = relay

    async def process(self, raw_body: bytes) -> PipelineOutcome:
        """Processa um corpo de webhook; nunca levanta (exceto cancelamento)."""
        try:
            outcome = await self._run(raw_body)
        except RelayPipelineError as exc:
            outcome = _outcome_for(exc)
            self._log_drop(exc, outcome)
        except Exception as exc:  # noqa: BLE001
            outcome = PipelineOutcome.UNEXPECTED_ERROR
            logger.exception(
                "webhook_unexpected_error",
                extra={"error": type(exc).__name__},
            )

        logger.info("webhook_finished", extra={"outcome": outcome.value})
        return outcome

    async def _run(self, raw_body: bytes) -> PipelineOutcome:
        msg = normalize(raw_body)
        self._log_received(msg)

        content_filter.ensure_accepted(msg, self._config.expected_session)
        logger.info("webhook_validation_passed")

        link = links.extract(msg.content)
        logger.info("video_link_extracted", extra={"link": link})

        with timed("video_resolver"):
            media_url = await self._resolver.resolve(link)
        logger.info("video_resolved", extra={"link": link})

        if not msg.sender_identifier:
            logger.warning("relay_skipped_empty_recipient", extra={"link": link})
            return PipelineOutcome.NO_RECIPIENT

        caption = build_caption(self._config.caption_prefix, link)
        with timed("media_relay"):
            await self._relay.send_media(msg.sender_identifier, media_url, caption)
        return PipelineOutcome.RELAYED

    def _log_received(self, msg: CanonicalMessage) -> None:
        logger.info(
            "webhook_received",
            extra={
                "session_id": msg.session_id,
                "sender": msg.sender_identifier,
                "content_length": len(msg.content),
            },
        )

    def _log_drop(self, exc: RelayPipelineError, outcome: PipelineOutcome) -> None:
        extra: dict[str, object] = {
            "stage": exc.stage,
            "outcome": outcome.value,
            "error": exc.message,
        }
        if isinstance(exc, FilteredOutError):
            extra["reason"] = exc.reason
            logger.info("webhook_filtered", extra=extra)
            return
        if isinstance(exc, ConfigurationMissingError):
            extra["setting"] = exc.setting
        elif isinstance(exc, ResolutionFailedError):
            extra["attempts"] = exc.attempts
        elif isinstance(exc, RelayFailedError):
            extra["status_code"] = exc.status_code
        logger.warning("webhook_dropped", extra=extra)
