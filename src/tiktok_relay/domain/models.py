"""Modelos de domínio do pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CanonicalMessage(BaseModel):
    """Mensagem normalizada para consumo do pipeline.

    Imutável após construída. Todos os campos são string (vazia se
    ausente na origem), nunca None.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = ""
    content: str = ""
    sender_identifier: str = ""
