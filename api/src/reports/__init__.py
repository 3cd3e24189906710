"""Moderation reports on posts and comments."""

from .models import (
    REPORTS_TABLES_CQL,
    Report,
    ReportCategory,
    ReportTarget,
    create_report,
)


__all__ = [
    "REPORTS_TABLES_CQL",
    "Report",
    "ReportCategory",
    "ReportTarget",
    "create_report",
]
