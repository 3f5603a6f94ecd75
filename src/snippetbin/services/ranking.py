"""Listing filters and orderings for pastes.

Everything here is side-effect free: given the same candidates, query and
clock value, ``rank`` returns the same sequence regardless of input order.

Orderings (all descending):

* ``default``: pinned, role priority of the snapshotted role, creation date.
* ``views``: view count, then creation date.
* ``likes``: like count, then creation date.

Expired pastes are always dropped, and private pastes are dropped unless the
viewer owns them.

Every ordering ends with the paste id so that no two distinct pastes compare
equal. Dates are compared as strings; the stored ISO 8601 format is fixed
width, which makes that equivalent to chronological order.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from snippetbin.core.roles import role_priority
from snippetbin.db.time import ensure_utc, parse_iso, to_iso, utcnow

__all__ = [
    "ALL_CATEGORIES",
    "PasteQuery",
    "RankablePaste",
    "SortMode",
    "is_expired",
    "matches",
    "rank",
    "sort_key",
]

# Category value that disables category filtering.
ALL_CATEGORIES = "all"


class SortMode(str, Enum):
    """Supported listing orders."""

    DEFAULT = "default"
    VIEWS = "views"
    LIKES = "likes"

    @classmethod
    def parse(cls, value: SortMode | str | None) -> SortMode:
        """Return the matching mode, falling back to ``DEFAULT``."""
        if isinstance(value, SortMode):
            return value
        try:
            return cls((value or cls.DEFAULT.value).strip().lower())
        except ValueError:
            return cls.DEFAULT


class RankablePaste(Protocol):
    """Attributes the engine reads from a candidate."""

    id: str
    title: str
    content: str
    category: str
    date: str
    owner_id: str | None
    role: str
    pinned: bool
    views: int
    likes: int
    is_private: bool
    expires_at: str | None

    @property
    def tag_list(self) -> list[str]: ...


@dataclass(frozen=True)
class PasteQuery:
    """Listing request; every filter is optional and they combine with AND."""

    search: str | None = None
    category: str | None = None
    tag: str | None = None
    owner_id: str | None = None
    viewer_id: str | None = None
    sort: SortMode = SortMode.DEFAULT

    @property
    def category_filter(self) -> str | None:
        """Category to match exactly, or None when filtering is disabled."""
        if not self.category or self.category == ALL_CATEGORIES:
            return None
        return self.category


def is_expired(paste: RankablePaste, now: datetime) -> bool:
    """Return True when ``expires_at`` is set and strictly before ``now``.

    A naive ``now`` is taken to be UTC.
    """
    raw = (paste.expires_at or "").strip()
    if not raw:
        return False
    expires = parse_iso(raw)
    if expires is None:
        return raw < to_iso(now)
    return expires < ensure_utc(now)


def _contains(haystack: str | None, needle: str) -> bool:
    return needle in (haystack or "").lower()


def matches(paste: RankablePaste, query: PasteQuery, now: datetime) -> bool:
    """Apply the filter stage of a listing to a single paste."""
    if is_expired(paste, now):
        return False

    # Private pastes are listed to their owner only.
    if paste.is_private and (not query.viewer_id or paste.owner_id != query.viewer_id):
        return False

    category = query.category_filter
    if category is not None and paste.category != category:
        return False

    if query.owner_id and paste.owner_id != query.owner_id:
        return False

    tags = paste.tag_list
    if query.tag:
        needle = query.tag.lower()
        if not any(_contains(tag, needle) for tag in tags):
            return False

    if query.search:
        needle = query.search.lower()
        if not (
            _contains(paste.title, needle)
            or _contains(paste.content, needle)
            or any(_contains(tag, needle) for tag in tags)
        ):
            return False

    return True


def sort_key(paste: RankablePaste, mode: SortMode) -> tuple[Any, ...]:
    """Return the descending sort key of ``paste`` under ``mode``."""
    if mode is SortMode.VIEWS:
        return (paste.views or 0, paste.date or "", paste.id)
    if mode is SortMode.LIKES:
        return (paste.likes or 0, paste.date or "", paste.id)
    return (
        1 if paste.pinned else 0,
        role_priority(paste.role),
        paste.date or "",
        paste.id,
    )


def rank(
    candidates: Iterable[RankablePaste],
    query: PasteQuery,
    now: datetime | None = None,
) -> list[RankablePaste]:
    """Filter ``candidates`` by ``query`` and return them in listing order."""
    now = ensure_utc(now or utcnow())
    mode = SortMode.parse(query.sort)
    visible = [paste for paste in candidates if matches(paste, query, now)]
    return sorted(visible, key=lambda paste: sort_key(paste, mode), reverse=True)
