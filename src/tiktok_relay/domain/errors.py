"""Taxonomia de erros do pipeline de webhook.

Todos os erros são tratados da mesma forma na borda HTTP: logados com
contexto (estágio, identificadores) e convertidos em descarte silencioso.
O chamador do webhook sempre recebe 200.
"""

from __future__ import annotations


class RelayPipelineError(Exception):
    """Erro base de um estágio do pipeline."""

    stage: str = "pipeline"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedPayloadError(RelayPipelineError):
    """Corpo não corresponde a nenhum dos formatos aceitos."""

    stage = "normalizer"


class FilteredOutError(RelayPipelineError):
    """Mensagem rejeitada por política (sessão divergente ou sem link).

    Não é um erro de fato; `reason` identifica a regra aplicada.
    """

    stage = "content_filter"

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


class NoLinkFoundError(RelayPipelineError):
    """Nenhum link de vídeo reconhecido no conteúdo."""

    stage = "link_extractor"


class ConfigurationMissingError(RelayPipelineError):
    """Configuração obrigatória ausente para um estágio."""

    def __init__(self, setting: str, stage: str) -> None:
        super().__init__(f"{setting} is missing")
        self.setting = setting
        self.stage = stage


class ResolutionFailedError(RelayPipelineError):
    """Todas as credenciais falharam ao resolver o vídeo.

    Preserva apenas a última falha observada; falhas individuais por
    credencial não são expostas além do resolver.
    """

    stage = "video_resolver"

    def __init__(self, last_error: Exception | None, attempts: int) -> None:
        super().__init__(
            f"all API keys failed after {attempts} attempt(s). Last error: {last_error}"
        )
        self.last_error = last_error
        self.attempts = attempts


class RelayFailedError(RelayPipelineError):
    """Gateway rejeitou o envio ou não respondeu."""

    stage = "media_relay"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
