"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests, and provides a fake Yubico cloud built on
httpx.MockTransport so race tests never touch the network.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx
import pytest

from infrastructure.http_client import HttpClient
from infrastructure.yubico.client import YubicoClient

OTP = "ccccccidlfvvvuefkdgcilrjcfffijigdhrbvngfgelb"


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


def echo_body(request: httpx.Request, status: str = "OK", **overrides) -> str:
    """Build a verify reply that echoes the request's otp and nonce."""
    fields = {
        "h": "c2lnbmF0dXJl",
        "t": "2026-10-18T12:00:00Z0123",
        "otp": request.url.params["otp"],
        "nonce": request.url.params["nonce"],
        "sl": "100",
        "status": status,
    }
    fields.update(overrides)
    return "".join(f"{k}={v}\r\n" for k, v in fields.items()) + "\r\n"


async def hang_forever(request: httpx.Request) -> httpx.Response:
    await asyncio.sleep(3600)
    raise AssertionError("unreachable")


@pytest.fixture
async def make_client():
    """Build a YubicoClient whose servers are routed to per-host handlers.

    ``handlers`` maps hostname → callable(request) returning an
    httpx.Response (sync or async) or raising an httpx error.
    """
    clients: list[HttpClient] = []
    seen: list[httpx.Request] = []

    def _make(handlers: dict, timeout: Optional[float] = None) -> YubicoClient:
        def route(request: httpx.Request):
            seen.append(request)
            return handlers[request.url.host](request)

        http = HttpClient(timeout=None, transport=httpx.MockTransport(route))
        clients.append(http)
        return YubicoClient(
            "12345", list(handlers), http_client=http, timeout=timeout
        )

    _make.requests = seen
    yield _make
    for http in clients:
        await http.aclose()
