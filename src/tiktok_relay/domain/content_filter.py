"""Regras de aceitação da mensagem canônica.

Regra 1: se a sessão esperada estiver configurada, a sessão da mensagem
deve ser igual a ela. Sessão esperada vazia aceita qualquer sessão.
Regra 2: o conteúdo precisa conter "https://". É só um pré-filtro
barato; a plataforma do link é validada pelo extrator.
"""

from __future__ import annotations

from tiktok_relay.domain.models import CanonicalMessage
from tiktok_relay.domain.errors import FilteredOutError

LINK_MARKER = "https://"

REASON_SESSION_MISMATCH = "session_mismatch"
REASON_NO_LINK_MARKER = "no_link_marker"


def rejection_reason(msg: CanonicalMessage, expected_session: str) -> str | None:
    """Retorna o motivo da rejeição, ou None se a mensagem é aceita."""
    if expected_session and msg.session_id != expected_session:
        return REASON_SESSION_MISMATCH
    if LINK_MARKER not in msg.content:
        return REASON_NO_LINK_MARKER
    return None


def accept(msg: CanonicalMessage, expected_session: str) -> bool:
    return rejection_reason(msg, expected_session) is None


def ensure_accepted(msg: CanonicalMessage, expected_session: str) -> None:
    """Levanta FilteredOutError se alguma regra rejeitar a mensagem."""
    reason = rejection_reason(msg, expected_session)
    if reason is not None:
        raise FilteredOutError(reason)
