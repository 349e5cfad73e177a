"""Rotas HTTP (webhook e healthcheck)."""

from __future__ import annotations

import anyio
from anyio import CancelScope
from fastapi import APIRouter, Depends, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import ClientDisconnect
from starlette.responses import Response

from tiktok_relay.api.dependencies import get_pipeline, get_settings
from tiktok_relay.application.pipeline import WebhookPipeline
from tiktok_relay.config.settings import Settings
from tiktok_relay.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

ACK_BODY = "OK"
WEBHOOK_PATH = "/webhook"


def _ack() -> PlainTextResponse:
    return PlainTextResponse(ACK_BODY, status_code=200)


async def _cancel_on_disconnect(request: Request, scope: CancelScope) -> None:
    """Cancela o processamento quando o cliente fecha a conexão.

    Depois do corpo lido, a próxima mensagem ASGI só chega quando a
    conexão cai (`http.disconnect`).
    """
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            logger.warning("webhook_client_disconnected")
            scope.cancel()
            return


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck de liveness, sem checagens internas."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.post(WEBHOOK_PATH)
async def webhook(
    request: Request,
    pipeline: WebhookPipeline = Depends(get_pipeline),
) -> PlainTextResponse:
    """Recebe o webhook e sempre responde 200.

    O remetente trata qualquer status diferente de 200 como falha de
    entrega e reenvia, o que duplicaria o processamento. Falhas viram
    descarte silencioso, visível apenas nos logs.

    Se o cliente desconectar, as chamadas externas em voo são canceladas.
    """
    try:
        raw_body = await request.body()
    except ClientDisconnect:
        logger.warning("webhook_body_read_failed", extra={"error": "ClientDisconnect"})
        return _ack()

    async with anyio.create_task_group() as tg:
        tg.start_soon(_cancel_on_disconnect, request, tg.cancel_scope)
        await pipeline.process(raw_body)
        tg.cancel_scope.cancel()

    return _ack()


async def method_not_allowed_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Qualquer método diferente de POST em /webhook também recebe 200.

    Nas demais rotas o 405 padrão do FastAPI é mantido.
    """
    if request.url.path != WEBHOOK_PATH:
        return await http_exception_handler(request, exc)
    logger.info("webhook_method_ignored", extra={"method": request.method})
    return _ack()
