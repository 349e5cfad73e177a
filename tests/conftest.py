from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from tests.helpers.upstream import GATEWAY_URL, LOOKUP_HOST, SESSION_ID, FakeUpstream
from tiktok_relay.api.app import create_app
from tiktok_relay.config.settings import Settings
from tiktok_relay.infra.http import HttpClient, HttpClientConfig


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        session_id=SESSION_ID,
        rapidapi_host=LOOKUP_HOST,
        rapidapi_keys="key-one,key-two",
        wa_api_url=GATEWAY_URL,
        wa_api_key="wa-secret",
        log_format="text",
    )


@pytest.fixture()
def http_client(upstream: FakeUpstream) -> HttpClient:
    config = HttpClientConfig(
        timeout_seconds=5.0,
        transport=httpx.MockTransport(upstream.handler),
    )
    return HttpClient(config)


@pytest.fixture()
def client(settings: Settings, http_client: HttpClient):
    app = create_app(settings, http_client=http_client)
    with TestClient(app) as test_client:
        yield test_client
