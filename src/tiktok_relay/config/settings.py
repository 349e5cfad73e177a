"""Configurações da aplicação via variáveis de ambiente.

Carregadas uma única vez no startup e injetadas nos componentes.
Nunca hardcode secrets (chaves RapidAPI, API key do gateway).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CAPTION_PREFIX: str = "ini bosque, video dari: "
DEFAULT_HTTP_TIMEOUT_SECONDS: float = 60.0


class Settings(BaseSettings):
    """Configurações lidas do ambiente.

    Os nomes das env vars seguem o deploy existente (SESSION_ID,
    RAPIDAPI_HOST, RAPIDAPI_KEYS, WA_API_URL, WA_API_KEY).
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        frozen=True,
    )

    # Aplicação
    service_name: str = "tiktok_relay"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"  # json | text

    # Servidor
    host: str = "0.0.0.0"
    port: int = 8080
    shutdown_grace_seconds: int = 5  # Segundos para requests em voo terminarem

    # Sessão do gateway; vazio desliga o filtro de sessão
    session_id: str = ""

    # Serviço de lookup (RapidAPI)
    rapidapi_host: str = ""
    rapidapi_keys: str = ""  # Lista separada por vírgula, ordem importa

    # Gateway WhatsApp
    wa_api_url: str = ""
    wa_api_key: str = ""

    # Chamadas de saída
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS

    # Legenda enviada com o vídeo (prefixo + link original)
    caption_prefix: str = DEFAULT_CAPTION_PREFIX

    @property
    def credential_set(self) -> tuple[str, ...]:
        """Retorna as credenciais RapidAPI na ordem configurada.

        Espaços são removidos e itens vazios descartados.
        """
        return tuple(key.strip() for key in self.rapidapi_keys.split(",") if key.strip())

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")

    def validate_lookup_config(self) -> list[str]:
        """Valida configuração do serviço de lookup de vídeo.

        Retorna lista de erros (vazia = tudo OK).
        """
        errors: list[str] = []
        if not self.rapidapi_host:
            errors.append("RAPIDAPI_HOST não configurado")
        if not self.credential_set:
            errors.append("RAPIDAPI_KEYS não configurado")
        return errors

    def validate_gateway_config(self) -> list[str]:
        """Valida configuração mínima do gateway WhatsApp."""
        errors: list[str] = []
        if not self.wa_api_url:
            errors.append("WA_API_URL não configurado")
        if not self.session_id:
            errors.append("SESSION_ID não configurado")
        return errors

    def validate_server_config(self) -> list[str]:
        """Valida parâmetros numéricos do servidor e das chamadas de saída."""
        errors: list[str] = []
        if self.http_timeout_seconds <= 0:
            errors.append("HTTP_TIMEOUT_SECONDS deve ser > 0")
        if self.shutdown_grace_seconds < 0:
            errors.append("SHUTDOWN_GRACE_SECONDS deve ser >= 0")
        if self.log_format.lower() not in {"json", "text"}:
            errors.append("LOG_FORMAT inválido: use json | text")
        return errors


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
