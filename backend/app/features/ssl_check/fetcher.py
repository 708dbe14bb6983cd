# backend/app/features/ssl_check/fetcher.py
"""HTTPS reachability probe with HTTP fallback."""

import asyncio
import socket
import ssl
from typing import Iterator, Optional

import httpx

from backend.app.core import logs
from .models import ConnectionOutcome, OutcomeKind

# Transport-level failures; anything else is a bug and propagates.
TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield the exception and every cause/context behind it."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def classify_error(exc: BaseException) -> Optional[OutcomeKind]:
    """
    Classify a failed HTTPS request from the typed causes it carries.

    Precedence: certificate/TLS, then name resolution, then timeout.

    Returns:
        The failure kind, or None if the error needs the HTTP fallback
        to tell "no HTTPS" apart from "unreachable".
    """
    chain = list(_exception_chain(exc))
    if any(isinstance(e, ssl.SSLError) for e in chain):
        return OutcomeKind.CERTIFICATE_ERROR
    if any(isinstance(e, socket.gaierror) for e in chain):
        return OutcomeKind.DNS_FAILURE
    if any(
        isinstance(e, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError))
        for e in chain
    ):
        return OutcomeKind.TIMEOUT
    return None


def _describe(exc: BaseException) -> str:
    """Most specific human-readable message in the chain."""
    for e in reversed(list(_exception_chain(exc))):
        if str(e):
            return str(e)
    return type(exc).__name__


class HeaderFetcher:
    """Issues a HEAD request to a domain and reports how it went."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        https_timeout: float = 10.0,
        http_timeout: float = 5.0,
    ) -> None:
        self.client = client
        self.https_timeout = https_timeout
        self.http_timeout = http_timeout

    async def _head(self, url: str, follow_redirects: bool, timeout: float) -> httpx.Response:
        """HEAD request bounded by ``timeout`` as a whole, redirects included."""
        return await asyncio.wait_for(
            self.client.head(url, follow_redirects=follow_redirects, timeout=timeout),
            timeout,
        )

    async def fetch(self, domain: str) -> ConnectionOutcome:
        """
        Probe ``https://{domain}``, falling back to plain HTTP on
        unclassified failures.

        Args:
            domain: Normalized, non-empty domain

        Returns:
            ConnectionOutcome with status and headers on success, or the
            classified failure kind and message
        """
        logs.info("Connecting over HTTPS", "fetcher", {"domain": domain})
        try:
            response = await self._head(f"https://{domain}", True, self.https_timeout)
        except asyncio.TimeoutError:
            message = f"Request timed out after {self.https_timeout}s"
            logs.warning(
                "HTTPS connection failed",
                "fetcher",
                {"domain": domain, "error": message, "kind": OutcomeKind.TIMEOUT.value},
            )
            return ConnectionOutcome(kind=OutcomeKind.TIMEOUT, message=message)
        except TRANSPORT_ERRORS as e:
            message = _describe(e)
            kind = classify_error(e)
            logs.warning(
                "HTTPS connection failed",
                "fetcher",
                {"domain": domain, "error": message, "kind": kind.value if kind else None},
            )
            if kind is not None:
                return ConnectionOutcome(kind=kind, message=message)
            return await self._fallback(domain, message)

        logs.info(
            "HTTPS connection succeeded",
            "fetcher",
            {"domain": domain, "status": response.status_code},
        )
        return ConnectionOutcome(
            kind=OutcomeKind.SUCCESS,
            status_code=response.status_code,
            headers=dict(response.headers.items()),
        )

    async def _fallback(self, domain: str, https_error: str) -> ConnectionOutcome:
        """Try plain HTTP to see whether the host exists at all."""
        try:
            response = await self._head(f"http://{domain}", False, self.http_timeout)
        except asyncio.TimeoutError:
            logs.warning(
                "HTTP fallback timed out",
                "fetcher",
                {"domain": domain, "timeout": self.http_timeout},
            )
            return ConnectionOutcome(kind=OutcomeKind.UNREACHABLE, message=https_error)
        except TRANSPORT_ERRORS as e:
            logs.warning(
                "HTTP fallback failed",
                "fetcher",
                {"domain": domain, "error": _describe(e)},
            )
            return ConnectionOutcome(kind=OutcomeKind.UNREACHABLE, message=https_error)

        logs.security(
            "Domain reachable only over HTTP",
            "fetcher",
            {"domain": domain, "status": response.status_code},
        )
        return ConnectionOutcome(
            kind=OutcomeKind.NO_HTTPS,
            status_code=response.status_code,
            message=https_error,
        )
