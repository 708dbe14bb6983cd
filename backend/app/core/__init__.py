# backend/app/core/__init__.py
"""Core utilities for the SSL grader."""

from .config import settings
from .exceptions import AppException, ScanError, ValidationError
from .observability import logs

__all__ = [
    "settings",
    "logs",
    "AppException",
    "ValidationError",
    "ScanError",
]
