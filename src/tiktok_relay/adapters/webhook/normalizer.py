"""Normalização do corpo bruto do webhook.

Remetentes são inconsistentes no envelope. Os formatos são tentados em
ordem fixa e o primeiro que atende ao critério de sucesso vence:

1. Lista de wrappers com `body` (não vazia): usa o body do primeiro item
2. Wrapper único com `body` cujo sessionId não é vazio
3. Payload direto, sem envelope

Não há revalidação depois que um formato é escolhido.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pydantic import TypeAdapter, ValidationError

from tiktok_relay.adapters.webhook.models import WebhookPayload, WebhookWrapper
from tiktok_relay.domain.errors import MalformedPayloadError
from tiktok_relay.domain.models import CanonicalMessage
from tiktok_relay.observability.logging import get_logger

logger = get_logger(__name__)

_WRAPPER_LIST_ADAPTER: TypeAdapter[list[WebhookWrapper]] = TypeAdapter(list[WebhookWrapper])


class PayloadShape(str, Enum):
    """Formatos de envelope aceitos, em ordem de prioridade."""

    WRAPPER_LIST = "wrapper_list"
    WRAPPER = "wrapper"
    DIRECT = "direct"


def _parse_wrapper_list(raw: bytes) -> WebhookPayload | None:
    wrappers = _WRAPPER_LIST_ADAPTER.validate_json(raw)
    if not wrappers:
        return None
    return wrappers[0].body


def _parse_wrapper(raw: bytes) -> WebhookPayload | None:
    wrapper = WebhookWrapper.model_validate_json(raw)
    if not wrapper.body.session_id:
        return None
    return wrapper.body


def _parse_direct(raw: bytes) -> WebhookPayload | None:
    return WebhookPayload.model_validate_json(raw)


_SHAPE_ATTEMPTS: tuple[tuple[PayloadShape, Callable[[bytes], WebhookPayload | None]], ...] = (
    (PayloadShape.WRAPPER_LIST, _parse_wrapper_list),
    (PayloadShape.WRAPPER, _parse_wrapper),
    (PayloadShape.DIRECT, _parse_direct),
)


def to_canonical(payload: WebhookPayload) -> CanonicalMessage:
    """Achata o payload do gateway na mensagem canônica."""
    return CanonicalMessage(
        session_id=payload.session_id,
        content=payload.data.content,
        sender_identifier=payload.data.full_message.key.sender_pn,
    )


def detect_payload(raw: bytes) -> tuple[PayloadShape, WebhookPayload]:
    """Retorna o primeiro formato que atende ao critério e o payload interno.

    Raises:
        MalformedPayloadError: Se nenhum dos formatos for aceito
    """
    last_error: ValidationError | None = None
    for shape, parse in _SHAPE_ATTEMPTS:
        try:
            payload = parse(raw)
        except ValidationError as exc:
            last_error = exc
            continue
        if payload is not None:
            return shape, payload

    error_count = last_error.error_count() if last_error else 0
    logger.warning(
        "webhook_payload_malformed",
        extra={"body_size": len(raw), "validation_errors": error_count},
    )
    raise MalformedPayloadError("payload does not match any accepted shape")


def normalize(raw: bytes) -> CanonicalMessage:
    """Converte o corpo bruto na mensagem canônica.

    Raises:
        MalformedPayloadError: Se nenhum dos formatos for aceito
    """
    shape, payload = detect_payload(raw)
    logger.debug("webhook_payload_shape", extra={"shape": shape.value})
    return to_canonical(payload)
