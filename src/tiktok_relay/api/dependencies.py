"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from tiktok_relay.application.pipeline import WebhookPipeline
from tiktok_relay.config.settings import Settings


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_pipeline(request: Request) -> WebhookPipeline:
    """Retorna o pipeline de webhook montado no startup."""

    return request.app.state.pipeline
