"""Administrator notices."""

from .models import NOTICES_TABLES_CQL, Notice, create_notice


__all__ = ["NOTICES_TABLES_CQL", "Notice", "create_notice"]
