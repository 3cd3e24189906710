"""Stored file metadata (read-only)."""

from .models import FILES_TABLES_CQL, StoredFile


__all__ = ["FILES_TABLES_CQL", "StoredFile"]
