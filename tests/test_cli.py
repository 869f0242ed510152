from __future__ import annotations

from typing import Any, Dict, List

import httpx
import pytest
import typer
from typer.testing import CliRunner

from cli.app import app
from cli.client import ApiClient
from cli.config import load_config


def _payload(station_id: str = "1001") -> Dict[str, Any]:
    return {
        "stationId": int(station_id),
        "period": {"start": "2024-04-30", "end": "2024-05-31"},
        "hourlyAverages": [
            {"hour": hour, "trafficCount": 100, "avgSpeed": 60.0} for hour in range(24)
        ],
        "sensorData": [
            {
                "name": "OHITUKSET_60MIN_KIINTEA_SUUNTA1",
                "unit": "kpl/h",
                "hourlyData": [{"hour": hour, "value": 100.0} for hour in range(24)],
            }
        ],
    }


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.requested: List[str] = []
        self.closed = False

    def get_hourly_average(self, station_id: str) -> Dict[str, Any]:
        self.requested.append(station_id)
        return _payload(station_id)

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


def test_hourly_average_command(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["hourly-average", "1001"])

    assert result.exit_code == 0
    assert "Hourly Averages" in result.stdout
    assert "station_id: 1001" in result.stdout
    assert "period: 2024-04-30 .. 2024-05-31" in result.stdout
    assert "OHITUKSET_60MIN_KIINTEA_SUUNTA1 [kpl/h]" in result.stdout
    assert stub.requested == ["1001"]
    assert stub.closed is True


def test_hourly_average_without_sensors(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["hourly-average", "1001", "--no-sensors"])

    assert result.exit_code == 0
    assert "Sensors" not in result.stdout


def test_global_options_configure_client(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(
        app, ["--base-url", "http://stats.local:9000/", "--timeout", "5", "hourly-average", "7"]
    )

    assert result.exit_code == 0
    assert stub.config.base_url == "http://stats.local:9000"
    assert stub.config.timeout == 5.0


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://env.local/")
    monkeypatch.setenv("CLI_HTTP_TIMEOUT", "not-a-number")

    config = load_config()

    assert config.base_url == "http://env.local"
    assert config.timeout == 30.0


def _client_with_transport(handler) -> ApiClient:
    client = ApiClient(load_config(base_url="http://testserver"))
    client._client = httpx.Client(
        base_url="http://testserver", transport=httpx.MockTransport(handler)
    )
    return client


def test_api_client_returns_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/traffic/station/1001/hourly-average"
        return httpx.Response(200, json=_payload())

    client = _client_with_transport(handler)
    try:
        assert client.get_hourly_average("1001")["stationId"] == 1001
    finally:
        client.close()


def test_api_client_bad_request_raises_bad_parameter() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        detail = {"message": "stationId must be an integer, got 'x'", "error": "ValidationError"}
        return httpx.Response(400, json={"detail": detail})

    client = _client_with_transport(handler)
    try:
        with pytest.raises(typer.BadParameter) as excinfo:
            client.get_hourly_average("x")
    finally:
        client.close()

    assert "stationId must be an integer" in str(excinfo.value)


def test_api_client_server_error_exits(capsys) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        detail = {"message": "Failed to get hourly average data", "error": "StoreQueryError: boom"}
        return httpx.Response(500, json={"detail": detail})

    client = _client_with_transport(handler)
    try:
        with pytest.raises(typer.Exit) as excinfo:
            client.get_hourly_average("1001")
    finally:
        client.close()

    assert excinfo.value.exit_code == 1
    assert "StoreQueryError: boom" in capsys.readouterr().err
