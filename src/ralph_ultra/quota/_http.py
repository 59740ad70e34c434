"""HTTP probe client wrapper around httpx."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from ralph_ultra.errors import TransportError


@dataclass(frozen=True)
class HttpResponse:
    """Parsed HTTP response."""

    status_code: int
    body: dict[str, Any]
    headers: dict[str, str]
    raw_text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ProbeClient:
    """Thin wrapper around :mod:`httpx` for quota probes.

    Non-2xx responses are returned, not raised, because some providers
    report quota headers on error responses. Transport failures raise
    :class:`TransportError`.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 3.0,
        provider: str = "",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._provider = provider
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers or {},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def get(self, path: str) -> HttpResponse:
        return self._send("GET", path)

    def post(self, path: str, json: dict[str, Any]) -> HttpResponse:
        return self._send("POST", path, json=json)

    def _send(self, method: str, path: str, json: dict[str, Any] | None = None) -> HttpResponse:
        try:
            resp = self._client.request(method, path, json=json)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"Timed out: {exc}", provider=self._provider, cause=exc
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                str(exc) or type(exc).__name__, provider=self._provider, cause=exc
            ) from exc

        raw_text = resp.text
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        return HttpResponse(
            status_code=resp.status_code,
            body=body,
            headers={k.lower(): v for k, v in resp.headers.items()},
            raw_text=raw_text,
        )

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> ProbeClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
