"""Opaque cursor codec for forward-only pagination.

A cursor is URL-safe base64 over a compact JSON array holding the sort key
values of the last row of a page. Clients treat it as an opaque string.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime

from tenantauthz.domain.exceptions import ValidationError


def encode_cursor(*values: object) -> str:
    """Encode sort key values into an opaque cursor."""
    raw = json.dumps(list(values), separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(cursor: str, arity: int) -> list:
    """Decode an opaque cursor into its sort key values.

    Raises ValidationError when the cursor was not produced by encode_cursor
    with the same number of values.
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii"))
        values = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ValidationError("Invalid cursor") from e
    if not isinstance(values, list) or len(values) != arity:
        raise ValidationError("Invalid cursor")
    return values


@dataclass(frozen=True)
class SequenceCursor:
    """Cursor over a single monotonically increasing insertion sequence."""

    seq: int

    def encode(self) -> str:
        return encode_cursor(self.seq)

    @classmethod
    def decode(cls, cursor: str) -> "SequenceCursor":
        (seq,) = decode_cursor(cursor, 1)
        if not isinstance(seq, int) or isinstance(seq, bool):
            raise ValidationError("Invalid cursor")
        return cls(seq=seq)


@dataclass(frozen=True)
class CreatedAtCursor:
    """Cursor over (created_at, id) with id as tie-break."""

    created_at: datetime
    id: str

    def encode(self) -> str:
        return encode_cursor(self.created_at.isoformat(), self.id)

    @classmethod
    def decode(cls, cursor: str) -> "CreatedAtCursor":
        created_at, row_id = decode_cursor(cursor, 2)
        if not isinstance(created_at, str) or not isinstance(row_id, str):
            raise ValidationError("Invalid cursor")
        try:
            ts = datetime.fromisoformat(created_at)
        except ValueError as e:
            raise ValidationError("Invalid cursor") from e
        return cls(created_at=ts, id=row_id)
