# backend/app/features/ssl_check/schemas.py
"""API request schemas and domain normalization."""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_PATH_RE = re.compile(r"/.*$", re.DOTALL)


def normalize_domain(value: str) -> str:
    """Reduce a URL or hostname to a bare lowercase host.

    ``https://Example.com/path`` becomes ``example.com``. Normalizing an
    already normalized domain returns it unchanged.
    """
    domain = _SCHEME_RE.sub("", value.strip())
    domain = _PATH_RE.sub("", domain)
    return domain.strip().lower()


class SslCheckRequest(BaseModel):
    """Request to grade a domain's HTTPS configuration."""

    domain: Optional[str] = Field(
        default=None, max_length=2048, description="Domain or URL to check"
    )

    @field_validator("domain")
    @classmethod
    def clean_domain(cls, v: Optional[str]) -> Optional[str]:
        """Normalize the domain; blank input becomes None."""
        if v is None:
            return v
        return normalize_domain(v) or None
