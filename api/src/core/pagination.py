"""Opaque cursor helpers for keyset pagination over time-ordered rows."""

import base64
import binascii
import json
from datetime import datetime
from uuid import UUID

from fastapi import HTTPException, status


def encode_cursor(created_at: datetime, item_id: UUID) -> str:
    """Encode pagination cursor."""
    data = {
        "created_at": created_at.isoformat(),
        "id": str(item_id),
    }
    return base64.urlsafe_b64encode(json.dumps(data).encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Decode pagination cursor.

    Raises:
        HTTPException(400): If the cursor was not produced by encode_cursor.
    """
    try:
        data = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        return datetime.fromisoformat(data["created_at"]), UUID(data["id"])
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid pagination cursor",
        ) from e
