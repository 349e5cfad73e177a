"""Resolução de link TikTok para URL direta de mídia via RapidAPI.

Responsabilidade:
- Montar um único endpoint GET (host + query `url` codificada)
- Tentar cada credencial em ordem até a primeira resposta válida
- Tratar erro de rede, status != 200, JSON inválido e `data.play`
  vazio como falha recuperável da credencial
- Nunca logar credenciais completas

As credenciais são limitadas por chave no provedor; tentar em sequência
com parada no primeiro sucesso gasta o mínimo de chamadas.
"""

from __future__ import annotations

import logging
from typing import Protocol
from urllib.parse import urlencode

from pydantic import Field, ValidationError

from tiktok_relay.adapters.base_models import LenientModel
from tiktok_relay.domain.errors import ConfigurationMissingError, ResolutionFailedError
from tiktok_relay.domain.failover import (
    AttemptFailedError,
    FailoverExhaustedError,
    first_success,
)
from tiktok_relay.infra.http import HttpClient, HttpError
from tiktok_relay.observability.logging import get_logger, mask_secret

logger: logging.Logger = get_logger(__name__)

HOST_HEADER = "X-RapidAPI-Host"
KEY_HEADER = "X-RapidAPI-Key"


class LookupData(LenientModel):
    play: str = ""


class LookupResponse(LenientModel):
    """Resposta do serviço de lookup; só `data.play` interessa."""

    data: LookupData = Field(default_factory=LookupData)


class LookupAttemptError(AttemptFailedError):
    """Falha de uma credencial específica (recuperável)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LookupStrategy(Protocol):
    """Contrato de uma tentativa de lookup com uma credencial.

    Deve retornar a URL de mídia não vazia ou levantar LookupAttemptError.
    """

    async def fetch(self, endpoint: str, credential: str) -> str: ...


def build_lookup_endpoint(host: str, video_url: str) -> str:
    """Formato: https://{host}/?url={video_url codificada}."""
    return f"https://{host}/?{urlencode({'url': video_url})}"


class RapidApiLookupStrategy:
    """Tentativa HTTP única contra o endpoint RapidAPI."""

    def __init__(self, http_client: HttpClient, host: str) -> None:
        self._http = http_client
        self._host = host

    async def fetch(self, endpoint: str, credential: str) -> str:
        headers = {HOST_HEADER: self._host, KEY_HEADER: credential.strip()}
        logger.info("lookup_attempt", extra={"credential": mask_secret(credential)})

        try:
            response = await self._http.get(endpoint, headers=headers)
        except HttpError as exc:
            raise LookupAttemptError(f"request failed: {exc}") from exc

        if response.status_code != 200:
            raise LookupAttemptError(
                f"HTTP status {response.status_code}", status_code=response.status_code
            )

        try:
            payload = LookupResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise LookupAttemptError("failed to decode response") from exc

        if not payload.data.play:
            raise LookupAttemptError("missing data.play in response")
        return payload.data.play


class VideoResolver:
    """Resolve links de vídeo com failover sequencial de credenciais."""

    def __init__(
        self,
        host: str,
        credentials: tuple[str, ...],
        strategy: LookupStrategy,
    ) -> None:
        self._host = host
        self._credentials = credentials
        self._strategy = strategy

    @property
    def credentials(self) -> tuple[str, ...]:
        return self._credentials

    async def resolve(self, video_url: str) -> str:
        """Retorna a URL direta de mídia para o link informado.

        Raises:
            ConfigurationMissingError: Host ou credenciais não configurados
            ResolutionFailedError: Todas as credenciais falharam
        """
        if not self._host:
            raise ConfigurationMissingError("RAPIDAPI_HOST", stage="video_resolver")
        if not self._credentials:
            raise ConfigurationMissingError("RAPIDAPI_KEYS", stage="video_resolver")

        endpoint = build_lookup_endpoint(self._host, video_url)

        async def _attempt(credential: str) -> str:
            try:
                return await self._strategy.fetch(endpoint, credential)
            except LookupAttemptError as exc:
                logger.warning(
                    "lookup_attempt_failed",
                    extra={
                        "credential": mask_secret(credential),
                        "error": str(exc),
                        "status_code": exc.status_code,
                    },
                )
                raise

        try:
            return await first_success(self._credentials, _attempt)
        except FailoverExhaustedError as exc:
            raise ResolutionFailedError(exc.last_error, exc.attempts) from exc.last_error


def create_video_resolver(
    http_client: HttpClient,
    host: str,
    credentials: tuple[str, ...],
) -> VideoResolver:
    """Factory para o resolver com a estratégia HTTP RapidAPI."""
    return VideoResolver(
        host=host,
        credentials=credentials,
        strategy=RapidApiLookupStrategy(http_client, host),
    )
