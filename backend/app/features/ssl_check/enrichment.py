# backend/app/features/ssl_check/enrichment.py
"""Certificate issuer/validity guesses from a chat-completion API."""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import httpx

from backend.app.core import logs
from .models import EnrichmentResult

DEFAULT_ISSUER = "Unknown"
DEFAULT_VALIDITY = timedelta(days=365)
DEFAULT_MONTHS = 12
DAYS_PER_MONTH = 30

SYSTEM_PROMPT = """You are an SSL certificate information provider. Based on the domain provided, return a JSON object with:
- issuer: string (the likely SSL certificate issuer for this domain - e.g., "Let's Encrypt", "DigiCert", "Cloudflare", "Amazon", "Google Trust Services", etc. Use common knowledge about major sites)
- expires_months: number (typical certificate validity in months, usually 3 for Let's Encrypt, 12 for others)

Be realistic based on the domain type."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EnrichmentUnavailable(Exception):
    """Internal signal that the reply could not be used."""


class AIEnrichmentAdapter:
    """
    Asks an external chat-completion endpoint for a certificate issuer and
    validity estimate. Never raises: on any failure the result carries
    defaults and ``used_fallback=True``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str],
        endpoint: str,
        model: str,
        timeout: Optional[float] = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.endpoint = endpoint
        self.model = model
        self.timeout = timeout
        self.now = now

    def fallback(self) -> EnrichmentResult:
        return EnrichmentResult(
            issuer=DEFAULT_ISSUER,
            expires_at=self.now() + DEFAULT_VALIDITY,
            used_fallback=True,
        )

    def build_payload(self, domain: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f"What SSL certificate issuer is likely used by: {domain}",
                },
            ],
            "response_format": {"type": "json_object"},
        }

    async def enrich(self, domain: str) -> EnrichmentResult:
        """Return the AI's guess for ``domain``, or defaults if unavailable."""
        if not self.api_key:
            logs.debug("No AI credential configured, using defaults", "enrichment")
            return self.fallback()

        try:
            response = await self.client.post(
                self.endpoint,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=self.build_payload(domain),
                timeout=self.timeout,
            )
            response.raise_for_status()
            return self.parse_reply(response.json())
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, EnrichmentUnavailable) as e:
            logs.warning(
                "AI enrichment unavailable, using defaults",
                "enrichment",
                {"domain": domain, "error": str(e) or type(e).__name__},
            )
            return self.fallback()

    def parse_reply(self, body: Any) -> EnrichmentResult:
        """
        Extract issuer and validity from a chat-completion response body.

        Raises:
            EnrichmentUnavailable: If the envelope or its JSON content is malformed
        """
        try:
            content = body["choices"][0]["message"]["content"]
            parsed = json.loads(content)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise EnrichmentUnavailable(f"Malformed AI reply: {e}") from e
        if not isinstance(parsed, dict):
            raise EnrichmentUnavailable("AI reply is not a JSON object")

        issuer = parsed.get("issuer")
        if not isinstance(issuer, str) or not issuer.strip():
            issuer = DEFAULT_ISSUER

        months = parsed.get("expires_months")
        if isinstance(months, bool) or not isinstance(months, (int, float)) or months <= 0:
            months = DEFAULT_MONTHS

        try:
            expires_at = self.now() + timedelta(days=months * DAYS_PER_MONTH)
        except (OverflowError, ValueError) as e:
            raise EnrichmentUnavailable(f"Implausible validity: {months} months") from e

        return EnrichmentResult(
            issuer=issuer.strip(),
            expires_at=expires_at,
            used_fallback=False,
        )
