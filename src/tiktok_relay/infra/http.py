"""Cliente HTTP centralizado com timeout e logging.

Este módulo fornece um cliente HTTP compartilhado para as chamadas
externas (serviço de lookup de vídeo e gateway WhatsApp), com:
- Timeout fixo por chamada (prazo total, não só por fase do httpx)
- Uma única tentativa por chamada (sem retry/backoff)
- Logging estruturado (sem credenciais)
- Injeção de headers padrão

Respostas de qualquer status são devolvidas ao chamador, que aplica
sua própria regra de sucesso. Só falhas de transporte viram HttpError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import anyio
import httpx

from tiktok_relay.observability.logging import get_logger

if TYPE_CHECKING:
    from tiktok_relay.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


def _sanitize_url(url: str) -> str:
    """Remove query string da URL para logging (pode conter links de usuários)."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}{parts.path}"


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP.

    Valores padrão são seguros e conservadores.
    """

    timeout_seconds: float = 60.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    transport: httpx.AsyncBaseTransport | None = None


class HttpError(Exception):
    """Erro de requisição HTTP sem expor informações sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


def _log_request_start(method: str, url: str) -> None:
    logger.debug(
        "Executando requisição HTTP",
        extra={"method": method, "url": _sanitize_url(url)},
    )


def _log_response(method: str, url: str, status_code: int) -> None:
    logger.debug(
        "Resposta HTTP recebida",
        extra={
            "method": method,
            "url": _sanitize_url(url),
            "status_code": status_code,
        },
    )


def _translate_transport_error(
    exc: httpx.HTTPError | TimeoutError, method: str, url: str
) -> HttpError:
    """Converte exceções do httpx em HttpError com log estruturado."""
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        message = "Timeout"
    elif isinstance(exc, httpx.ConnectError):
        message = "Erro de conexão"
    else:
        message = f"Erro de transporte: {type(exc).__name__}"

    logger.warning(
        "Requisição HTTP falhou",
        extra={
            "method": method,
            "url": _sanitize_url(url),
            "error": message,
        },
    )
    return HttpError(message)


class HttpClient:
    """Cliente HTTP assíncrono com timeout e logging.

    Uso típico:
        async with HttpClient(config) as client:
            response = await client.post(url, json=payload)
    """

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        """Inicializa cliente com configuração."""
        self._config = config or HttpClientConfig()
        self._client: httpx.AsyncClient | None = None

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    async def _get_client(self) -> httpx.AsyncClient:
        """Retorna cliente httpx (lazy loading)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds),
                headers=self._config.default_headers,
                verify=self._config.verify_ssl,
                transport=self._config.transport,
            )
        return self._client

    async def close(self) -> None:
        """Fecha o cliente e libera recursos."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpClient:
        """Suporte a async context manager."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Fecha cliente ao sair do context."""
        await self.close()

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Executa uma única requisição.

        Raises:
            HttpError: Em timeout, erro de conexão ou outro erro de transporte
        """
        client = await self._get_client()
        _log_request_start(method, url)

        try:
            with anyio.fail_after(self._config.timeout_seconds):
                response = await client.request(method, url, **kwargs)
        except (httpx.HTTPError, TimeoutError) as exc:
            raise _translate_transport_error(exc, method, url) from exc

        _log_response(method, url, response.status_code)
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Executa GET."""
        return await self._request("GET", url, **kwargs)

    async def post(
        self,
        url: str,
        json: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Executa POST com corpo JSON."""
        return await self._request("POST", url, json=json, **kwargs)


def create_http_client(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HttpClient:
    """Factory para criar cliente HTTP configurado.

    Args:
        settings: Configurações da aplicação. Se None, usa get_settings()
        transport: Transport httpx alternativo (testes)

    Returns:
        HttpClient configurado conforme settings
    """
    if settings is None:
        from tiktok_relay.config.settings import get_settings

        settings = get_settings()

    config = HttpClientConfig(
        timeout_seconds=float(settings.http_timeout_seconds),
        default_headers={
            "User-Agent": f"{settings.service_name}/{settings.version}",
        },
        transport=transport,
    )

    logger.info(
        "Cliente HTTP criado",
        extra={"timeout_seconds": config.timeout_seconds},
    )

    return HttpClient(config)
