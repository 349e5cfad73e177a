"""Configurações centralizadas do tiktok_relay.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única
- DEFAULT_CAPTION_PREFIX: legenda padrão enviada junto com o vídeo

Uso típico:
    from tiktok_relay.config import get_settings
"""

from tiktok_relay.config.settings import (
    DEFAULT_CAPTION_PREFIX,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_CAPTION_PREFIX",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
]
