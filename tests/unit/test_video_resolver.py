"""Testes para VideoResolver (failover sequencial de credenciais)."""

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from tests.helpers.upstream import LOOKUP_HOST, PLAY_URL, FakeUpstream
from tiktok_relay.adapters.video_lookup.resolver import (
    HOST_HEADER,
    KEY_HEADER,
    LookupAttemptError,
    RapidApiLookupStrategy,
    VideoResolver,
    build_lookup_endpoint,
    create_video_resolver,
)
from tiktok_relay.domain.errors import ConfigurationMissingError, ResolutionFailedError
from tiktok_relay.infra.http import HttpClient

VIDEO = "https://vt.tiktok.com/ZS123/"


def _resolver(http_client: HttpClient, keys: tuple[str, ...]) -> VideoResolver:
    return create_video_resolver(http_client, host=LOOKUP_HOST, credentials=keys)


class TestBuildLookupEndpoint:
    def test_encodes_video_url_as_query_parameter(self) -> None:
        endpoint = build_lookup_endpoint("api.test", "https://vt.tiktok.com/ZS1/?a=1&b=2")
        assert endpoint.startswith("https://api.test/?url=")
        query = httpx.URL(endpoint).query.decode()
        assert parse_qs(query)["url"] == ["https://vt.tiktok.com/ZS1/?a=1&b=2"]


class TestResolveSuccess:
    @pytest.mark.asyncio
    async def test_first_credential_success_makes_single_call(
        self, http_client: HttpClient, upstream: FakeUpstream
    ) -> None:
        async with http_client:
            media = await _resolver(http_client, ("k1", "k2")).resolve(VIDEO)

        assert media == PLAY_URL
        assert len(upstream.lookup_calls) == 1
        request = upstream.lookup_calls[0]
        assert request.method == "GET"
        assert request.headers[HOST_HEADER] == LOOKUP_HOST
        assert request.headers[KEY_HEADER] == "k1"
        assert request.url.params["url"] == VIDEO

    @pytest.mark.asyncio
    async def test_only_last_credential_succeeds(
        self, http_client: HttpClient, upstream: FakeUpstream
    ) -> None:
        """N credenciais, só a última funciona: exatamente N chamadas, em ordem."""
        upstream.lookup_responses = [
            httpx.Response(429, json={"message": "quota"}),
            httpx.Response(200, content=b"<html>"),
            httpx.Response(200, json={"data": {"play": ""}}),
            httpx.Response(200, json={"data": {"play": "https://cdn.test/last.mp4"}}),
        ]
        keys = ("k1", "k2", "k3", "k4")

        async with http_client:
            media = await _resolver(http_client, keys).resolve(VIDEO)

        assert media == "https://cdn.test/last.mp4"
        assert [r.headers[KEY_HEADER] for r in upstream.lookup_calls] == list(keys)

    @pytest.mark.asyncio
    async def test_network_error_moves_to_next_credential(
        self, http_client: HttpClient, upstream: FakeUpstream
    ) -> None:
        upstream.lookup_responses = [httpx.ConnectError("refused")]

        async with http_client:
            media = await _resolver(http_client, ("k1", "k2")).resolve(VIDEO)

        assert media == PLAY_URL
        assert len(upstream.lookup_calls) == 2

    @pytest.mark.asyncio
    async def test_credentials_are_not_rotated_between_calls(
        self, http_client: HttpClient, upstream: FakeUpstream
    ) -> None:
        """Sem memória da credencial que funcionou: cada resolução recomeça do início."""
        upstream.lookup_responses = [httpx.Response(500)]
        resolver = _resolver(http_client, ("k1", "k2"))

        async with http_client:
            await resolver.resolve(VIDEO)
            await resolver.resolve(VIDEO)

        assert [r.headers[KEY_HEADER] for r in upstream.lookup_calls] == ["k1", "k2", "k1"]


class TestResolveFailure:
    @pytest.mark.asyncio
    async def test_all_credentials_fail(
        self, http_client: HttpClient, upstream: FakeUpstream
    ) -> None:
        upstream.lookup_responses = [
            httpx.Response(403),
            httpx.Response(200, json={"data": None}),
        ]

        async with http_client:
            with pytest.raises(ResolutionFailedError) as exc_info:
                await _resolver(http_client, ("k1", "k2")).resolve(VIDEO)

        error = exc_info.value
        assert error.attempts == 2
        assert isinstance(error.last_error, LookupAttemptError)
        assert "data.play" in str(error.last_error)
        assert error.__cause__ is error.last_error
        assert len(upstream.lookup_calls) == 2

    @pytest.mark.asyncio
    async def test_non_200_success_status_is_a_failure(
        self, http_client: HttpClient, upstream: FakeUpstream
    ) -> None:
        upstream.lookup_responses = [httpx.Response(201, json={"data": {"play": PLAY_URL}})]

        async with http_client:
            with pytest.raises(ResolutionFailedError) as exc_info:
                await _resolver(http_client, ("k1",)).resolve(VIDEO)

        assert exc_info.value.last_error.status_code == 201  # type: ignore[union-attr]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("host", "keys", "setting"),
        [("", ("k1",), "RAPIDAPI_HOST"), (LOOKUP_HOST, (), "RAPIDAPI_KEYS")],
    )
    async def test_missing_configuration_fails_before_any_call(
        self,
        http_client: HttpClient,
        upstream: FakeUpstream,
        host: str,
        keys: tuple[str, ...],
        setting: str,
    ) -> None:
        resolver = create_video_resolver(http_client, host=host, credentials=keys)

        with pytest.raises(ConfigurationMissingError) as exc_info:
            await resolver.resolve(VIDEO)

        assert exc_info.value.setting == setting
        assert upstream.requests == []


class TestRapidApiLookupStrategy:
    @pytest.mark.asyncio
    async def test_strips_credential_whitespace(
        self, http_client: HttpClient, upstream: FakeUpstream
    ) -> None:
        strategy = RapidApiLookupStrategy(http_client, LOOKUP_HOST)
        async with http_client:
            await strategy.fetch(build_lookup_endpoint(LOOKUP_HOST, VIDEO), "  k1 ")
        assert upstream.lookup_calls[0].headers[KEY_HEADER] == "k1"
