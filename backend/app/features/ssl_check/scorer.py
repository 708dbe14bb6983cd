# backend/app/features/ssl_check/scorer.py
"""Security header scoring.

Starts from 100 and deducts a fixed weight for every missing header, then
maps the score to a letter grade. Pure functions, no I/O.
"""

from typing import List, NamedTuple, Tuple

from .models import Grade, GradeResult, SecurityHeaderSet

BASELINE_SCORE = 100
GOOD_CONFIGURATION_NOTE = "Your SSL configuration looks good!"


class HeaderCheck(NamedTuple):
    """One scored header: which field to read and what a miss costs."""

    field: str
    weight: int
    vulnerability: str
    recommendation: str


# Order matters: findings are reported in this order.
HEADER_CHECKS: Tuple[HeaderCheck, ...] = (
    HeaderCheck(
        "strict_transport_security",
        15,
        "No HSTS header detected",
        "Implement HSTS to enforce HTTPS communication and protect against downgrade attacks.",
    ),
    HeaderCheck(
        "x_frame_options",
        10,
        "Missing X-Frame-Options header",
        "Add X-Frame-Options header to prevent clickjacking attacks.",
    ),
    HeaderCheck(
        "x_content_type_options",
        5,
        "Missing X-Content-Type-Options header",
        "Add X-Content-Type-Options: nosniff to prevent MIME type sniffing.",
    ),
    HeaderCheck(
        "content_security_policy",
        10,
        "No Content-Security-Policy header",
        "Implement Content-Security-Policy to prevent XSS and injection attacks.",
    ),
)

XSS_PROTECTION_VULNERABILITY = "Missing X-XSS-Protection header"
XSS_PROTECTION_RECOMMENDATION = (
    "Add X-XSS-Protection header to enable legacy browser XSS filtering."
)

GRADE_THRESHOLDS: Tuple[Tuple[int, Grade], ...] = (
    (95, Grade.A_PLUS),
    (90, Grade.A),
    (80, Grade.B),
    (70, Grade.C),
    (60, Grade.D),
)


def grade_for_score(score: int) -> Grade:
    """Map a numeric score to a letter grade (any integer is accepted)."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return Grade.F


def score_headers(
    headers: SecurityHeaderSet,
    xss_protection_weight: int = 0,
) -> GradeResult:
    """
    Score a set of security headers.

    Args:
        headers: Header values from the target's HTTPS response
        xss_protection_weight: Deduction for a missing X-XSS-Protection
            header. The default of 0 inspects the header without penalizing
            it or reporting a finding.

    Returns:
        GradeResult with vulnerabilities and recommendations in check order
    """
    score = BASELINE_SCORE
    vulnerabilities: List[str] = []
    recommendations: List[str] = []

    for check in HEADER_CHECKS:
        if not getattr(headers, check.field):
            vulnerabilities.append(check.vulnerability)
            recommendations.append(check.recommendation)
            score -= check.weight

    if xss_protection_weight > 0 and not headers.x_xss_protection:
        vulnerabilities.append(XSS_PROTECTION_VULNERABILITY)
        recommendations.append(XSS_PROTECTION_RECOMMENDATION)
        score -= xss_protection_weight

    if not vulnerabilities:
        recommendations.append(GOOD_CONFIGURATION_NOTE)

    return GradeResult(
        grade=grade_for_score(score),
        score=score,
        vulnerabilities=vulnerabilities,
        recommendations=recommendations,
    )
