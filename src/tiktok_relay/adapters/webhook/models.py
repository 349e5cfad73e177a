"""Modelos do webhook de entrada.

Responsabilidade:
- Estruturar os três formatos de payload aceitos (lista de wrappers,
  wrapper único, payload direto)
- Ignorar campos desconhecidos e tratar `null` como ausente
"""

from __future__ import annotations

from pydantic import Field

from tiktok_relay.adapters.base_models import LenientModel


class MessageKey(LenientModel):
    sender_pn: str = Field(default="", alias="senderPn")


class FullMessage(LenientModel):
    key: MessageKey = Field(default_factory=MessageKey)


class WebhookData(LenientModel):
    content: str = ""
    full_message: FullMessage = Field(default_factory=FullMessage, alias="fullMessage")


class WebhookPayload(LenientModel):
    """Payload simplificado enviado pelo gateway WhatsApp."""

    session_id: str = Field(default="", alias="sessionId")
    data: WebhookData = Field(default_factory=WebhookData)


class WebhookWrapper(LenientModel):
    """Payload aninhado sob `body` (formato de alguns remetentes)."""

    body: WebhookPayload = Field(default_factory=WebhookPayload)
