"""
Cursor-based pagination primitives.

Cursors encode the (created_at, id) compound key of a row so forward paging
stays stable at scale. Every list fetch returns a PaginatedResult envelope.
"""
import base64
import binascii
import json
from datetime import datetime
from typing import Generic, List, Literal, Optional, TypeVar, Union

import structlog
from pydantic import BaseModel, Field

from .results import RepositoryError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Default number of records per page
DEFAULT_PAGE_SIZE = 25

# Allowed page size bounds
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


class PageInfo(BaseModel):
    """Position of a page within an ordered result set."""
    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None
    # Total count of matching rows, when the repository can afford it
    total_count: Optional[int] = None

    model_config = {"frozen": True}

    @classmethod
    def empty(cls) -> "PageInfo":
        return cls()


# Order of the (created_at, id) key a paginated fetch walks
SortDirection = Literal["asc", "desc"]


class PaginationParams(BaseModel):
    """Requested page: size, cursor and direction."""
    limit: Optional[int] = None
    cursor: Optional[str] = None
    direction: Literal["forward", "backward"] = "forward"


class CursorData(BaseModel):
    timestamp: str
    id: str


class PaginatedResult(BaseModel, Generic[T]):
    """One page of rows plus its PageInfo (and an error when the fetch failed)."""
    data: List[T] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo)
    error: Optional[RepositoryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _timestamp_str(value: Union[datetime, str]) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def encode_cursor(timestamp: Union[datetime, str], record_id: str) -> str:
    """Encode a (timestamp, id) pair into an opaque url-safe cursor."""
    raw = json.dumps(
        {"timestamp": _timestamp_str(timestamp), "id": str(record_id)},
        separators=(",", ":"),
    )
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> Optional[CursorData]:
    """
    Decode a cursor back to its (timestamp, id) pair.

    Args:
        cursor: Opaque cursor produced by encode_cursor

    Returns:
        CursorData, or None when the cursor is malformed or incomplete
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
        payload = json.loads(raw)
    except (ValueError, binascii.Error, UnicodeError) as e:
        logger.warning("Failed to decode cursor", cursor=cursor, error=str(e))
        return None

    if not isinstance(payload, dict) or not payload.get("timestamp") or not payload.get("id"):
        logger.warning("Invalid cursor data - missing fields", cursor=cursor)
        return None

    return CursorData(timestamp=str(payload["timestamp"]), id=str(payload["id"]))


def cursor_for(row) -> str:
    """Create a cursor from any row exposing created_at and id."""
    return encode_cursor(row.created_at, row.id)


def get_valid_page_size(limit: Optional[int] = None) -> int:
    """Clamp a requested page size to the allowed bounds (default when unset)."""
    if not limit:
        return DEFAULT_PAGE_SIZE
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, limit))


def process_paginated_results(
    rows: List[T],
    limit: int,
    cursor: Optional[str] = None
) -> PaginatedResult[T]:
    """
    Build a page from rows fetched with limit + 1.

    The extra row only signals that a next page exists; it is not returned.

    Args:
        rows: Rows in page order, at most limit + 1 of them
        limit: Page size that was requested
        cursor: Cursor the page was fetched after, if any

    Returns:
        PaginatedResult with start/end cursors taken from the first/last row
    """
    has_more = len(rows) > limit
    page = rows[:limit] if has_more else list(rows)

    return PaginatedResult(
        data=page,
        page_info=PageInfo(
            has_next_page=has_more,
            has_previous_page=bool(cursor),
            start_cursor=cursor_for(page[0]) if page else None,
            end_cursor=cursor_for(page[-1]) if page else None,
        ),
    )


def empty_paginated_result(error: Optional[RepositoryError] = None) -> PaginatedResult:
    """Empty page, used for error cases."""
    return PaginatedResult(data=[], page_info=PageInfo.empty(), error=error)
