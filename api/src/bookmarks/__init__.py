"""Member bookmarks of posts."""

from .models import BOOKMARKS_TABLES_CQL, Bookmark, create_bookmark


__all__ = ["BOOKMARKS_TABLES_CQL", "Bookmark", "create_bookmark"]
