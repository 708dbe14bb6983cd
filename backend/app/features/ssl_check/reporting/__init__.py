# backend/app/features/ssl_check/reporting/__init__.py
"""Terminal reporting for SSL check results."""

from .console import (
    console,
    show_error,
    show_progress,
    show_report,
    show_results_table,
)

__all__ = [
    "console",
    "show_error",
    "show_progress",
    "show_report",
    "show_results_table",
]
