# tests/conftest.py
"""Shared fixtures: settings, stub transports and chat-completion replies."""

import json
import socket
import ssl
from datetime import datetime, timezone
from typing import Callable, Dict

import httpx
import pytest

from backend.app.core.config import Settings

AI_URL = "https://ai.test/v1/chat/completions"
FIXED_NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)

ALL_SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "default-src 'self'",
}


def make_settings(**overrides) -> Settings:
    values = dict(
        AI_API_KEY="test-key",
        AI_GATEWAY_URL=AI_URL,
        AI_MODEL="test-model",
        AI_TIMEOUT=None,
        XSS_PROTECTION_WEIGHT=0,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def chat_reply(content: str) -> dict:
    """Chat-completion response body wrapping ``content``."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def connect_error(cause: BaseException) -> httpx.ConnectError:
    """httpx.ConnectError carrying ``cause`` the way the transport chains it."""
    exc = httpx.ConnectError(str(cause))
    exc.__cause__ = cause
    return exc


def certificate_error() -> httpx.ConnectError:
    return connect_error(
        ssl.SSLCertVerificationError(1, "[SSL: CERTIFICATE_VERIFY_FAILED] certificate has expired")
    )


def dns_error() -> httpx.ConnectError:
    return connect_error(socket.gaierror(-2, "Name or service not known"))


def refused_error() -> httpx.ConnectError:
    return connect_error(ConnectionRefusedError(111, "Connection refused"))




class StubInternet:
    """
    MockTransport handler routing by scheme/host.

    Each slot is either a headers dict (200 response), an exception to raise,
    or a (sync or async) callable taking the request. ``None`` means
    "connection refused".
    """

    def __init__(
        self,
        https: object = None,
        http: object = None,
        ai: object = None,
    ) -> None:
        self.https = https
        self.http = http
        self.ai = ai
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == AI_URL:
            slot = self.ai
        elif request.url.scheme == "https":
            slot = self.https
        else:
            slot = self.http

        if slot is None:
            raise refused_error()
        if isinstance(slot, BaseException):
            raise slot
        if callable(slot):
            return slot(request)
        if isinstance(slot, dict) and "choices" in slot:
            return httpx.Response(200, json=slot)
        return httpx.Response(200, headers=slot)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def hosts(self) -> list:
        return [f"{r.method} {r.url.scheme}://{r.url.host}" for r in self.requests]


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings


@pytest.fixture
def ai_ok() -> Dict:
    return chat_reply(json.dumps({"issuer": "DigiCert", "expires_months": 12}))


@pytest.fixture
def fixed_now() -> Callable[[], datetime]:
    return lambda: FIXED_NOW
