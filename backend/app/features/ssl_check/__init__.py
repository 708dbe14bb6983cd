# backend/app/features/ssl_check/__init__.py
"""SSL check feature module."""

from .models import (
    ConnectionOutcome,
    EnrichmentResult,
    Grade,
    GradeResult,
    OutcomeKind,
    SecurityHeaderSet,
    SslReport,
)
from .schemas import SslCheckRequest, normalize_domain
from .scorer import grade_for_score, score_headers

__all__ = [
    "ConnectionOutcome",
    "EnrichmentResult",
    "Grade",
    "GradeResult",
    "OutcomeKind",
    "SecurityHeaderSet",
    "SslReport",
    "SslCheckRequest",
    "normalize_domain",
    "grade_for_score",
    "score_headers",
]
