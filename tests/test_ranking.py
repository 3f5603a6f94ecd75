# tests/test_ranking.py
"""Tests for listing filters and orderings."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from snippetbin.db.time import to_iso
from snippetbin.services.ranking import (
    PasteQuery,
    SortMode,
    is_expired,
    matches,
    rank,
    sort_key,
)

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


@dataclass
class FakePaste:
    id: str
    title: str = "Untitled"
    content: str = "body"
    category: str = "Uncategorized"
    tags: list[str] = field(default_factory=list)
    date: str = "2024-06-01T00:00:00.000Z"
    owner_id: str | None = None
    role: str = "user"
    pinned: bool = False
    views: int = 0
    likes: int = 0
    is_private: bool = False
    expires_at: str | None = None

    @property
    def tag_list(self) -> list[str]:
        return self.tags


def _ids(pastes) -> list[str]:
    return [paste.id for paste in pastes]


def test_pinned_user_paste_beats_unpinned_founder_paste() -> None:
    a = FakePaste("A", role="founder", date="2024-05-02T00:00:00.000Z")
    b = FakePaste("B", role="user", pinned=True, date="2024-05-01T00:00:00.000Z")
    assert _ids(rank([a, b], PasteQuery(), NOW)) == ["B", "A"]


def test_same_role_orders_newest_first() -> None:
    a = FakePaste("A", role="staff", date="2024-05-03T00:00:00.000Z")
    c = FakePaste("C", role="staff", date="2024-05-02T00:00:00.000Z")
    assert _ids(rank([c, a], PasteQuery(), NOW)) == ["A", "C"]


def test_default_order_uses_role_priority_before_date() -> None:
    pastes = [
        FakePaste("u", role="user", date="2024-05-30T00:00:00.000Z"),
        FakePaste("m", role="manager", date="2024-05-01T00:00:00.000Z"),
        FakePaste("s", role="staff", date="2024-04-01T00:00:00.000Z"),
        FakePaste("f", role="founder", date="2024-03-01T00:00:00.000Z"),
        FakePaste("x", role="ghost", date="2024-05-31T00:00:00.000Z"),
    ]
    assert _ids(rank(pastes, PasteQuery(), NOW)) == ["f", "s", "m", "u", "x"]


def test_default_order_is_non_increasing() -> None:
    rng = random.Random(7)
    roles = ["founder", "staff", "manager", "user"]
    pastes = [
        FakePaste(
            f"p{i}",
            role=rng.choice(roles),
            pinned=rng.random() < 0.3,
            date=to_iso(NOW - timedelta(hours=rng.randint(0, 500))),
        )
        for i in range(40)
    ]
    ranked = rank(pastes, PasteQuery(), NOW)
    keys = [sort_key(paste, SortMode.DEFAULT) for paste in ranked]
    assert keys == sorted(keys, reverse=True)


def test_rank_ignores_input_order() -> None:
    pastes = [
        FakePaste("a", views=3, date="2024-05-01T00:00:00.000Z"),
        FakePaste("b", views=3, date="2024-05-01T00:00:00.000Z"),
        FakePaste("c", views=9, date="2024-04-01T00:00:00.000Z"),
    ]
    query = PasteQuery(sort=SortMode.VIEWS)
    expected = _ids(rank(pastes, query, NOW))
    shuffled = list(reversed(pastes))
    assert _ids(rank(shuffled, query, NOW)) == expected
    assert expected == ["c", "b", "a"]


def test_views_and_likes_sorts() -> None:
    pastes = [
        FakePaste("a", views=1, likes=5, date="2024-05-01T00:00:00.000Z"),
        FakePaste("b", views=7, likes=0, date="2024-05-02T00:00:00.000Z"),
        FakePaste("c", views=7, likes=2, date="2024-05-03T00:00:00.000Z"),
    ]
    assert _ids(rank(pastes, PasteQuery(sort=SortMode.VIEWS), NOW)) == ["c", "b", "a"]
    assert _ids(rank(pastes, PasteQuery(sort=SortMode.LIKES), NOW)) == ["a", "c", "b"]


def test_pinned_flag_does_not_affect_views_sort() -> None:
    pinned = FakePaste("pinned", pinned=True, role="founder", views=0)
    popular = FakePaste("popular", views=10)
    assert _ids(rank([pinned, popular], PasteQuery(sort=SortMode.VIEWS), NOW)) == [
        "popular",
        "pinned",
    ]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("likes", SortMode.LIKES), ("VIEWS", SortMode.VIEWS), ("newest", SortMode.DEFAULT), (None, SortMode.DEFAULT)],
)
def test_sort_mode_parse_falls_back_to_default(raw, expected) -> None:
    assert SortMode.parse(raw) is expected


def test_expired_pastes_are_dropped() -> None:
    yesterday = to_iso(NOW - timedelta(days=1))
    tomorrow = to_iso(NOW + timedelta(days=1))
    pastes = [
        FakePaste("old", expires_at=yesterday),
        FakePaste("live", expires_at=tomorrow),
        FakePaste("forever"),
        FakePaste("blank", expires_at=""),
    ]
    assert sorted(_ids(rank(pastes, PasteQuery(), NOW))) == ["blank", "forever", "live"]


def test_expiry_boundary_is_strict() -> None:
    assert not is_expired(FakePaste("edge", expires_at=to_iso(NOW)), NOW)
    assert is_expired(FakePaste("gone", expires_at=to_iso(NOW - timedelta(milliseconds=1))), NOW)


def test_naive_now_is_treated_as_utc() -> None:
    naive_now = NOW.replace(tzinfo=None)
    pastes = [
        FakePaste("gone", expires_at=to_iso(NOW - timedelta(seconds=1))),
        FakePaste("live", expires_at=to_iso(NOW + timedelta(seconds=1))),
    ]

    assert is_expired(pastes[0], naive_now)
    assert not is_expired(pastes[1], naive_now)
    assert _ids(rank(pastes, PasteQuery(), naive_now)) == ["live"]


def test_unparseable_expiry_compares_as_string() -> None:
    assert is_expired(FakePaste("x", expires_at="2000-garbage"), NOW)
    assert not is_expired(FakePaste("y", expires_at="9999-garbage"), NOW)


def test_search_matches_title_content_or_tag_case_insensitively() -> None:
    pastes = [
        FakePaste("title", title="Fast SORTING tricks"),
        FakePaste("content", content="def sorting(): pass"),
        FakePaste("tag", tags=["Sorting"]),
        FakePaste("none", title="Hashing", content="md5"),
    ]
    found = _ids(rank(pastes, PasteQuery(search="sorting"), NOW))
    assert sorted(found) == ["content", "tag", "title"]


def test_tag_filter_matches_substring_of_a_single_tag() -> None:
    pastes = [
        FakePaste("py", tags=["python", "cli"]),
        FakePaste("js", tags=["javascript"]),
        FakePaste("split", tags=["py", "thon"]),
    ]
    assert sorted(_ids(rank(pastes, PasteQuery(tag="PYTH"), NOW))) == ["py"]


@pytest.mark.parametrize("category", ["all", "", None])
def test_category_all_disables_filter(category) -> None:
    pastes = [FakePaste("a", category="Python"), FakePaste("b", category="Rust")]
    assert len(rank(pastes, PasteQuery(category=category), NOW)) == 2


def test_category_filter_is_exact() -> None:
    pastes = [FakePaste("a", category="Python"), FakePaste("b", category="python")]
    assert _ids(rank(pastes, PasteQuery(category="Python"), NOW)) == ["a"]


def test_owner_filter() -> None:
    pastes = [FakePaste("mine", owner_id="u1"), FakePaste("theirs", owner_id="u2")]
    assert _ids(rank(pastes, PasteQuery(owner_id="u1"), NOW)) == ["mine"]


def test_private_pastes_only_listed_to_owner() -> None:
    secret = FakePaste("secret", owner_id="u1", is_private=True)
    public = FakePaste("public", owner_id="u2")
    assert not matches(secret, PasteQuery(), NOW)
    assert not matches(secret, PasteQuery(viewer_id="u2"), NOW)
    assert matches(secret, PasteQuery(viewer_id="u1"), NOW)
    assert _ids(rank([secret, public], PasteQuery(), NOW)) == ["public"]


def test_filters_combine_with_and() -> None:
    pastes = [
        FakePaste("hit", category="Python", tags=["cli"], title="argparse demo"),
        FakePaste("wrong-cat", category="Rust", tags=["cli"], title="argparse demo"),
        FakePaste("wrong-tag", category="Python", tags=["web"], title="argparse demo"),
    ]
    query = PasteQuery(search="argparse", category="Python", tag="cli")
    assert _ids(rank(pastes, query, NOW)) == ["hit"]
