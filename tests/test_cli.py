from __future__ import annotations

from typing import Any, Dict, List

import pytest
import typer
from typer.testing import CliRunner

from cli.app import app


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.requested: List[int] = []
        self.payload: Dict[str, Any] = {
            "sensor_id": 1234,
            "pm25": 8.04,
            "aqi": 34,
            "category": "Good",
            "color": "green",
            "temperature": 70.0,
            "humidity": 41.26,
        }
        self.closed = False

    def get_reading(self, sensor_id: int) -> Dict[str, Any]:
        self.requested.append(sensor_id)
        payload = self.payload.copy()
        payload["sensor_id"] = sensor_id
        return payload

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_reading_command(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--base-url", "http://proxy.test/", "reading", "1234"])

    assert result.exit_code == 0
    assert "AQI 34: Good" in result.stdout
    assert "PM2.5: 8.0 µg/m³" in result.stdout
    assert "Humidity: 41.3%" in result.stdout
    assert stub.requested == [1234]
    assert stub.config.base_url == "http://proxy.test"
    assert stub.closed is True


def test_reading_rejects_non_positive_sensor(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["reading", "0"])

    assert result.exit_code != 0
    assert stub.requested == []


def test_watch_command_polls_on_interval(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)
    sleeps: List[float] = []
    monkeypatch.setattr("cli.app.time.sleep", sleeps.append)

    result = runner.invoke(app, ["watch", "55", "--interval", "5", "--count", "3"])

    assert result.exit_code == 0
    assert stub.requested == [55, 55, 55]
    assert sleeps == [5.0, 5.0]


def test_watch_defaults_to_one_minute(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)
    sleeps: List[float] = []
    monkeypatch.delenv("CLI_POLL_INTERVAL", raising=False)
    monkeypatch.setattr("cli.app.time.sleep", sleeps.append)

    result = runner.invoke(app, ["watch", "55", "--count", "2"])

    assert result.exit_code == 0
    assert sleeps == [60.0]


def test_watch_stops_when_request_fails(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)

    def failing(sensor_id: int) -> Dict[str, Any]:
        raise typer.Exit(code=1)

    stub.get_reading = failing  # type: ignore[method-assign]
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["watch", "55"])

    assert result.exit_code == 1
    assert stub.closed is True


def test_aqi_command_converts_locally(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["aqi", "55.5"])

    assert result.exit_code == 0
    assert "aqi: 151" in result.stdout
    assert "category: Unhealthy" in result.stdout
    assert "color: red" in result.stdout
    assert stub.requested == []


@pytest.mark.parametrize("value", ["nan", "inf"])
def test_aqi_command_rejects_non_finite_input(monkeypatch, runner: CliRunner, value: str) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["aqi", value])

    assert result.exit_code == 2
    assert not isinstance(result.exception, (ValueError, OverflowError))
    assert "aqi:" not in result.stdout
