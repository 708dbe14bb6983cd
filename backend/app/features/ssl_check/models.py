# backend/app/features/ssl_check/models.py
"""Data models for the SSL check."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field


class Grade(str, Enum):
    """Letter grade summarizing security-header completeness."""

    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"
    NOT_APPLICABLE = "N/A"


class OutcomeKind(str, Enum):
    """Result of trying to reach a domain."""

    SUCCESS = "success"
    CERTIFICATE_ERROR = "certificate_error"
    DNS_FAILURE = "dns_failure"
    TIMEOUT = "timeout"
    NO_HTTPS = "no_https"  # HTTPS failed, plain HTTP answered
    UNREACHABLE = "unreachable"


class ConnectionOutcome(BaseModel):
    """Outcome of a single connection attempt (HTTPS plus optional HTTP fallback)."""

    kind: OutcomeKind
    status_code: Optional[int] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS


class SecurityHeaderSet(BaseModel):
    """Values of the inspected security headers; None means absent."""

    strict_transport_security: Optional[str] = None
    x_frame_options: Optional[str] = None
    x_content_type_options: Optional[str] = None
    x_xss_protection: Optional[str] = None
    content_security_policy: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "SecurityHeaderSet":
        """Build from a response header mapping, matching names case-insensitively."""
        lowered = {k.lower(): v for k, v in headers.items()}
        return cls(
            strict_transport_security=lowered.get("strict-transport-security"),
            x_frame_options=lowered.get("x-frame-options"),
            x_content_type_options=lowered.get("x-content-type-options"),
            x_xss_protection=lowered.get("x-xss-protection"),
            content_security_policy=lowered.get("content-security-policy"),
        )


class GradeResult(BaseModel):
    """Outcome of scoring a header set."""

    grade: Grade
    score: int
    vulnerabilities: List[str]
    recommendations: List[str]


class EnrichmentResult(BaseModel):
    """Best-effort certificate details from the AI gateway."""

    issuer: str
    expires_at: datetime
    used_fallback: bool


class SslReport(BaseModel):
    """Response payload for one SSL check.

    Serialize with ``exclude_unset=True``: failure reports set
    ``domain_exists`` (and usually ``error_message``), success reports do not.
    """

    is_valid: bool
    grade: Grade
    issuer: Optional[str] = None
    expires_at: Optional[datetime] = None
    vulnerabilities: Optional[List[str]] = None
    recommendations: List[str] = Field(default_factory=list)
    domain_exists: Optional[bool] = None
    error_message: Optional[str] = None

    def to_payload(self) -> dict:
        """JSON-ready dict in the wire shape."""
        return self.model_dump(mode="json", exclude_unset=True)
