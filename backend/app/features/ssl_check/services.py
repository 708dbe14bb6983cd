# backend/app/features/ssl_check/services.py
"""SSL check service - connects, scores headers, enriches, assembles the report."""

from typing import Callable, Dict, List, NamedTuple, Optional

import httpx

from backend.app.core import logs
from backend.app.core.config import Settings, settings as default_settings
from .enrichment import AIEnrichmentAdapter
from .fetcher import HeaderFetcher
from .models import (
    ConnectionOutcome,
    Grade,
    OutcomeKind,
    SecurityHeaderSet,
    SslReport,
)
from .scorer import score_headers


class FailureTemplate(NamedTuple):
    """Fixed report content for a connection failure kind."""

    grade: Grade
    domain_exists: bool
    vulnerabilities: Callable[[ConnectionOutcome], List[str]]
    recommendations: List[str]
    error_message: Optional[str]  # formatted with the domain


FAILURE_TEMPLATES: Dict[OutcomeKind, FailureTemplate] = {
    OutcomeKind.CERTIFICATE_ERROR: FailureTemplate(
        grade=Grade.F,
        domain_exists=True,
        vulnerabilities=lambda o: [f"SSL/TLS Certificate Error: {o.message}"],
        recommendations=[
            "Fix SSL certificate configuration",
            "Ensure certificate is not expired",
            "Use a trusted certificate authority",
        ],
        error_message=None,
    ),
    OutcomeKind.DNS_FAILURE: FailureTemplate(
        grade=Grade.NOT_APPLICABLE,
        domain_exists=False,
        vulnerabilities=lambda o: ["Domain does not exist or has no DNS records"],
        recommendations=[
            "Verify the domain name is correct",
            "Check if DNS is properly configured",
            "The domain may not be registered",
        ],
        error_message='Domain "{domain}" could not be found. Please verify the domain name.',
    ),
    OutcomeKind.TIMEOUT: FailureTemplate(
        grade=Grade.NOT_APPLICABLE,
        domain_exists=True,
        vulnerabilities=lambda o: ["Connection timeout - server may be slow or blocking"],
        recommendations=[
            "Try again later",
            "Check if the domain is accessible",
            "The server may be experiencing issues",
        ],
        error_message='Connection to "{domain}" timed out.',
    ),
    OutcomeKind.NO_HTTPS: FailureTemplate(
        grade=Grade.F,
        domain_exists=True,
        vulnerabilities=lambda o: [
            "No valid HTTPS configuration",
            "Site accessible only via HTTP",
        ],
        recommendations=[
            "Install an SSL certificate",
            "Use Let's Encrypt for free SSL",
            "Redirect all HTTP traffic to HTTPS",
        ],
        error_message=None,
    ),
    OutcomeKind.UNREACHABLE: FailureTemplate(
        grade=Grade.NOT_APPLICABLE,
        domain_exists=False,
        vulnerabilities=lambda o: ["Domain unreachable"],
        recommendations=[
            "Verify the domain name is correct",
            "Check if the domain is registered and has DNS configured",
        ],
        error_message='Cannot connect to "{domain}". Please verify the domain exists.',
    ),
}


def failure_report(domain: str, outcome: ConnectionOutcome) -> SslReport:
    """Build the report for a failed connection outcome."""
    template = FAILURE_TEMPLATES[outcome.kind]
    fields = dict(
        is_valid=False,
        grade=template.grade,
        issuer=None,
        expires_at=None,
        vulnerabilities=template.vulnerabilities(outcome),
        recommendations=list(template.recommendations),
        domain_exists=template.domain_exists,
    )
    if template.error_message:
        fields["error_message"] = template.error_message.format(domain=domain)
    return SslReport(**fields)


class SslCheckService:
    """Runs the per-request SSL check pipeline."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            config: Settings to use (defaults to the global settings)
            transport: Optional httpx transport, e.g. a MockTransport in tests
        """
        self.config = config or default_settings
        self.transport = transport

    async def check(self, domain: str) -> SslReport:
        """
        Grade the HTTPS configuration of a normalized domain.

        Returns:
            SslReport in the failure shape if the connection failed, otherwise
            the success shape with grade, findings and enrichment
        """
        logs.info("Starting SSL check", "ssl_check", {"domain": domain})

        async with httpx.AsyncClient(transport=self.transport) as client:
            fetcher = HeaderFetcher(
                client,
                https_timeout=self.config.HTTPS_TIMEOUT,
                http_timeout=self.config.HTTP_FALLBACK_TIMEOUT,
            )
            outcome = await fetcher.fetch(domain)

            if not outcome.is_success:
                report = failure_report(domain, outcome)
                logs.info(
                    "SSL check finished with connection failure",
                    "ssl_check",
                    {"domain": domain, "kind": outcome.kind.value, "grade": report.grade.value},
                )
                return report

            headers = SecurityHeaderSet.from_headers(outcome.headers)
            graded = score_headers(
                headers, xss_protection_weight=self.config.XSS_PROTECTION_WEIGHT
            )

            adapter = AIEnrichmentAdapter(
                client,
                api_key=self.config.AI_API_KEY,
                endpoint=self.config.AI_GATEWAY_URL,
                model=self.config.AI_MODEL,
                timeout=self.config.AI_TIMEOUT,
            )
            enrichment = await adapter.enrich(domain)

        report = SslReport(
            is_valid=True,
            grade=graded.grade,
            issuer=enrichment.issuer,
            expires_at=enrichment.expires_at,
            vulnerabilities=graded.vulnerabilities or None,
            recommendations=graded.recommendations,
        )

        logs.info(
            "SSL check complete",
            "ssl_check",
            {
                "domain": domain,
                "grade": graded.grade.value,
                "score": graded.score,
                "enrichment_fallback": enrichment.used_fallback,
            },
        )
        return report
