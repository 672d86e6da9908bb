from __future__ import annotations

import asyncio

import httpx
import pytest

from services.upstream import PurpleAirClient, UpstreamError


def _fetch(client: PurpleAirClient, sensor_id: str):
    async def scenario():
        try:
            return await client.fetch_sensor(sensor_id)
        finally:
            await client.aclose()

    return asyncio.run(scenario())


def test_fetch_sends_api_key_and_returns_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"sensor": {"sensor_index": 42}})

    client = PurpleAirClient(
        api_key="secret",
        base_url="https://purple.test/",
        transport=httpx.MockTransport(handler),
    )

    payload = _fetch(client, "42")

    assert payload == {"sensor": {"sensor_index": 42}}
    assert len(seen) == 1
    assert str(seen[0].url) == "https://purple.test/v1/sensors/42"
    assert seen[0].headers["X-API-Key"] == "secret"


def test_error_status_raises_upstream_error() -> None:
    client = PurpleAirClient(
        api_key="",
        base_url="https://purple.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(403, json={"error": "ApiKeyInvalidError"})),
    )

    with pytest.raises(UpstreamError) as excinfo:
        _fetch(client, "42")

    assert str(excinfo.value) == "Failed to fetch sensor data"
    assert excinfo.value.reason == "status 403"


def test_transport_error_raises_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = PurpleAirClient(
        api_key="",
        base_url="https://purple.test",
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(UpstreamError) as excinfo:
        _fetch(client, "42")

    assert str(excinfo.value) == "Failed to fetch sensor data"
    assert excinfo.value.sensor_id == "42"


def test_invalid_json_raises_upstream_error() -> None:
    client = PurpleAirClient(
        api_key="",
        base_url="https://purple.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")),
    )

    with pytest.raises(UpstreamError):
        _fetch(client, "42")
