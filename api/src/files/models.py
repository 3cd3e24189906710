"""Database models for stored upload metadata.

Uploading is handled elsewhere; this module only reads what was stored so
posts can attach images to balance options by stored filename.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


FILE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.files (
    stored_name TEXT PRIMARY KEY,
    original_name TEXT,
    url TEXT,
    content_type TEXT,
    size BIGINT,
    created_at TIMESTAMP
)
"""

FILES_TABLES_CQL = [FILE_TABLE_CQL]


@dataclass
class StoredFile:
    """Metadata of an uploaded file."""

    stored_name: str
    original_name: str
    url: str
    content_type: str | None
    size: int
    created_at: datetime | None

    @classmethod
    def from_row(cls, row: Any) -> "StoredFile":
        return cls(
            stored_name=row.stored_name,
            original_name=row.original_name or row.stored_name,
            url=row.url,
            content_type=row.content_type,
            size=row.size or 0,
            created_at=row.created_at,
        )
