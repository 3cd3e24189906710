"""Utility modules for BalanceTalk API."""

from src.utils.dates import ensure_utc_aware, utcnow


__all__ = ["ensure_utc_aware", "utcnow"]
