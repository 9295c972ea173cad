from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Dict, NoReturn

import httpx
import typer

from cli.config import CLIConfig

PENDING_STATUSES = frozenset({"uploaded", "processing"})


class ApiClient:
    """Minimal HTTP client for the fire risk service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=30.0)

    def close(self) -> None:
        self._client.close()

    def score_reading(self, reading: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._client.post("/fri/score", json=reading)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def get_stations(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/stations")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def upload_batch(self, path: Path) -> str:
        if not path.exists():
            raise typer.BadParameter(f"File {path} does not exist.")
        if not path.is_file():
            raise typer.BadParameter(f"Path {path} is not a file.")

        try:
            with path.open("rb") as handle:
                response = self._client.post(
                    "/batches",
                    files={"file": (path.name, handle, "text/csv")},
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        batch_id = payload.get("batch_id")
        if not isinstance(batch_id, str):
            raise typer.BadParameter("Unexpected response payload when uploading batch.")
        return batch_id

    def get_result(self, batch_id: str) -> Dict[str, Any]:
        try:
            response = self._client.get(f"/batches/{batch_id}")
            if response.status_code == 404:
                raise typer.BadParameter(f"Batch {batch_id} was not found.")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def poll_result(self, batch_id: str, interval: float, timeout: float) -> Dict[str, Any]:
        deadline = time.monotonic() + timeout
        last_payload: Dict[str, Any] | None = None
        while time.monotonic() <= deadline:
            last_payload = self.get_result(batch_id)
            if last_payload.get("status") not in PENDING_STATUSES:
                return last_payload
            time.sleep(interval)
        typer.secho(
            (
                f"Timed out waiting for batch {batch_id}. "
                f"Last status: {last_payload.get('status') if last_payload else 'unknown'}"
            ),
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> NoReturn:
        detail: Any = None
        try:
            detail = exc.response.json().get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
