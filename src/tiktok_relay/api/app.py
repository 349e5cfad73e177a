"""Fábrica da aplicação FastAPI.

Uso (produção):
    uvicorn tiktok_relay.api.app:app --host 0.0.0.0 --port 8080

Ou com a fábrica:
    uvicorn --factory tiktok_relay.api.app:create_app --host 0.0.0.0 --port 8080

Ou via entrypoint, com período de graça no shutdown:
    python -m tiktok_relay
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tiktok_relay.adapters.video_lookup.resolver import create_video_resolver
from tiktok_relay.adapters.whatsapp.gateway import WhatsAppGatewayClient
from tiktok_relay.api.routes import method_not_allowed_handler, router
from tiktok_relay.application.pipeline import PipelineConfig, WebhookPipeline
from tiktok_relay.config.settings import Settings, get_settings
from tiktok_relay.infra.http import HttpClient, create_http_client
from tiktok_relay.observability.logging import configure_logging, get_logger
from tiktok_relay.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


def _log_incomplete_config(settings: Settings) -> None:
    """Avisa sobre configuração incompleta sem impedir o boot.

    O webhook continua respondendo 200; cada request com configuração
    ausente é descartado com ConfigurationMissingError nos logs.
    """
    problems = settings.validate_lookup_config() + settings.validate_gateway_config()
    if problems:
        logger.warning(
            "configuration_incomplete",
            extra={"problems": problems, "environment": settings.environment},
        )


def build_pipeline(settings: Settings, http_client: HttpClient) -> WebhookPipeline:
    """Monta o pipeline com dependências imutáveis lidas no startup."""
    resolver = create_video_resolver(
        http_client,
        host=settings.rapidapi_host,
        credentials=settings.credential_set,
    )
    relay = WhatsAppGatewayClient(
        http_client,
        base_url=settings.wa_api_url,
        session_id=settings.session_id,
        api_key=settings.wa_api_key,
    )
    config = PipelineConfig(
        expected_session=settings.session_id,
        caption_prefix=settings.caption_prefix,
    )
    return WebhookPipeline(config=config, resolver=resolver, relay=relay)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Fecha o cliente HTTP compartilhado no shutdown."""
    settings: Settings = app.state.settings
    logger.info("app_starting", extra={"service": settings.service_name})

    yield

    logger.info("app_shutting_down", extra={"service": settings.service_name})
    await app.state.http_client.close()


def create_app(
    settings: Settings | None = None,
    http_client: HttpClient | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name, settings.log_format)

    validation_errors = settings.validate_server_config()
    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    _log_incomplete_config(settings)

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)
    app.add_exception_handler(405, method_not_allowed_handler)

    http_client = http_client or create_http_client(settings)
    app.state.settings = settings
    app.state.http_client = http_client
    app.state.pipeline = build_pipeline(settings, http_client)

    return app


app = create_app()
