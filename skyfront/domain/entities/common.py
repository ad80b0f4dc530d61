"""Shared helpers and pagination records for backend payloads."""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar

T = TypeVar("T")


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp from the backend.

    Accepts a trailing ``Z`` and passes datetimes through untouched.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def pick(payload: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present (and not None) in payload."""
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return default


def to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Pagination:
    """Paging metadata returned with list endpoints."""

    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 1

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]], item_count: int = 0) -> "Pagination":
        if not payload:
            return cls(page=1, limit=max(item_count, 1), total=item_count, total_pages=1)
        limit = to_int(pick(payload, "limit", "size", "pageSize"), 10) or 10
        total = to_int(pick(payload, "total", "totalElements", "totalItems"), item_count)
        total_pages = to_int(pick(payload, "totalPages"), 0)
        if total_pages <= 0:
            total_pages = max(1, math.ceil(total / limit))
        return cls(
            page=to_int(payload.get("page"), 1) or 1,
            limit=limit,
            total=total,
            total_pages=total_pages,
        )

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass
class Page(Generic[T]):
    """One page of a paginated listing."""

    items: List[T] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def page_of(raw: Dict[str, Any], factory) -> Page:
    """Build a typed Page from a raw ``{"items", "pagination"}`` mapping."""
    items = [factory(item) for item in raw.get("items", [])]
    return Page(items=items, pagination=Pagination.from_dict(raw.get("pagination"), len(items)))


def align_now(moment: datetime, now: datetime) -> datetime:
    """Make ``now`` comparable with ``moment`` when only one is timezone-aware."""
    if moment.tzinfo is not None and now.tzinfo is None:
        return now.astimezone()
    if moment.tzinfo is None and now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now
