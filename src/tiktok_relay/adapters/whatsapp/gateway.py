"""Cliente do gateway WhatsApp para envio de mídia.

Responsabilidade:
- Montar o endpoint send-media a partir da URL base e da sessão
- Serializar o payload (número, URL da mídia, legenda, tipo "video")
- Anexar x-api-key quando configurado
- Tratar erro de rede ou status >= 400 como falha (sem retry)

O destinatário é repassado sem normalização: o sufixo da plataforma
(ex.: "@s.whatsapp.net") é mantido. Se o gateway exigir só dígitos,
o ajuste deve ser feito na configuração do gateway.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from tiktok_relay.domain.errors import ConfigurationMissingError, RelayFailedError
from tiktok_relay.infra.http import HttpClient, HttpError
from tiktok_relay.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

API_KEY_HEADER = "x-api-key"
MEDIA_TYPE_VIDEO = "video"


class SendMediaRequest(BaseModel):
    """Payload aceito pelo endpoint send-media do gateway."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    number: str
    media_url: str = Field(alias="mediaUrl")
    caption: str = ""
    media_type: str = Field(default=MEDIA_TYPE_VIDEO, alias="mediaType")

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


def build_send_media_endpoint(base_url: str, session_id: str) -> str:
    """Formato: {base_url}/api/whatsapp/session/{session_id}/send-media.

    Remove uma barra final da URL base, se houver.
    """
    if base_url.endswith("/"):
        base_url = base_url[:-1]
    return f"{base_url}/api/whatsapp/session/{session_id}/send-media"


class WhatsAppGatewayClient:
    """Envia mídia ao destinatário através do gateway WhatsApp."""

    def __init__(
        self,
        http_client: HttpClient,
        base_url: str,
        session_id: str,
        api_key: str = "",
    ) -> None:
        self._http = http_client
        self._base_url = base_url
        self._session_id = session_id
        self._api_key = api_key

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._api_key:
            headers[API_KEY_HEADER] = self._api_key
        return headers

    async def send_media(self, recipient: str, media_url: str, caption: str) -> None:
        """Envia uma única vez; qualquer falha vira RelayFailedError.

        Raises:
            ConfigurationMissingError: WA_API_URL ou SESSION_ID ausentes
            RelayFailedError: Erro de rede ou status >= 400
        """
        if not self._base_url:
            raise ConfigurationMissingError("WA_API_URL", stage="media_relay")
        if not self._session_id:
            raise ConfigurationMissingError("SESSION_ID", stage="media_relay")

        endpoint = build_send_media_endpoint(self._base_url, self._session_id)
        request = SendMediaRequest(number=recipient, media_url=media_url, caption=caption)

        logger.info("gateway_send_media", extra={"recipient": recipient})
        try:
            response = await self._http.post(
                endpoint, json=request.to_wire(), headers=self._build_headers()
            )
        except HttpError as exc:
            raise RelayFailedError(f"request to WA API failed: {exc}") from exc

        if response.status_code >= 400:
            raise RelayFailedError(
                f"WA API returned error status: {response.status_code}",
                status_code=response.status_code,
            )

        logger.info(
            "gateway_send_media_succeeded",
            extra={"recipient": recipient, "status_code": response.status_code},
        )
