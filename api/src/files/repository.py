"""Cassandra access for stored file metadata."""

from typing import TYPE_CHECKING

from src.core.database import first_row

from .models import StoredFile


if TYPE_CHECKING:
    from cassandra.cluster import Session


class FileRepository:
    """Lookup of stored files by their stored name."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._get_by_stored_name = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.files WHERE stored_name = ?
        """)

    async def find_by_stored_name(self, stored_name: str) -> StoredFile | None:
        row = first_row(
            await self.session.aexecute(self._get_by_stored_name, [stored_name])
        )
        return StoredFile.from_row(row) if row else None
