from __future__ import annotations

from typing import Any, Dict

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the traffic stats service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_hourly_average(self, station_id: str) -> Dict[str, Any]:
        try:
            response = self._client.get(f"/traffic/station/{station_id}/hourly-average")
            if response.status_code == 400:
                raise typer.BadParameter(self._error_detail(response))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            detail = response.json().get("detail")
        except ValueError:
            return response.text.strip() or "no detail provided."
        if isinstance(detail, dict):
            message = detail.get("message")
            error = detail.get("error")
            return f"{message} ({error})" if error else str(message)
        return str(detail or "no detail provided.")

    @classmethod
    def _handle_http_error(cls, exc: httpx.HTTPStatusError) -> None:
        detail = cls._error_detail(exc.response)
        message = f"Request failed with status {exc.response.status_code}: {detail}"
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
