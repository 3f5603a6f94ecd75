# tests/test_paste_repo.py
"""Tests for the paste repository."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from snippetbin.core.errors import DuplicateId, Forbidden, InvalidInput, NotFound
from snippetbin.core.roles import Role
from snippetbin.db.time import to_iso, utcnow
from snippetbin.models import Comment, Paste, PasteLike
from snippetbin.repositories.paste_repo import PasteRepository
from snippetbin.services.ranking import PasteQuery


def _like_users(session, paste_id: str) -> set[str]:
    return set(session.scalars(select(PasteLike.user_id).where(PasteLike.paste_id == paste_id)))


def test_create_applies_defaults(repo: PasteRepository) -> None:
    paste = repo.create(paste_id="p1", content="x = 1")

    assert paste.id == "p1"
    assert paste.title == "Untitled"
    assert paste.category == "Uncategorized"
    assert paste.role == "user"
    assert paste.pinned is False
    assert paste.views == 0
    assert paste.likes == 0
    assert paste.tag_list == []
    assert paste.date.endswith("Z")


def test_create_generates_id_when_blank(repo: PasteRepository) -> None:
    paste = repo.create(paste_id="  ", content="body")
    assert paste.id.strip()


def test_create_normalizes_tags_and_date(repo: PasteRepository) -> None:
    paste = repo.create(
        paste_id="p1",
        content="body",
        tags=" python, cli ,,python",
        date="2024-01-02T03:04:05+00:00",
        role=Role.STAFF,
    )
    assert paste.tag_list == ["python", "cli"]
    assert paste.date == "2024-01-02T03:04:05.000Z"
    assert paste.role == "staff"


@pytest.mark.parametrize("content", ["", "   \n\t", None])
def test_create_rejects_empty_content(repo: PasteRepository, content) -> None:
    with pytest.raises(InvalidInput):
        repo.create(paste_id="p1", content=content)


def test_create_rejects_malformed_expiry(repo: PasteRepository) -> None:
    with pytest.raises(InvalidInput):
        repo.create(paste_id="p1", content="body", expires_at="next tuesday")


def test_create_duplicate_id(repo: PasteRepository) -> None:
    repo.create(paste_id="dup", content="first")
    with pytest.raises(DuplicateId):
        repo.create(paste_id="dup", content="second")

    # The session stays usable after the conflict.
    assert repo.get_by_id("dup").content == "first"


def test_get_by_id_counts_views(repo: PasteRepository) -> None:
    repo.create(paste_id="p1", content="body", title="Kept", category="Go", owner_id="u1")

    for expected in (1, 2, 3):
        paste = repo.get_by_id("p1")
        assert paste.views == expected

    assert paste.title == "Kept"
    assert paste.category == "Go"
    assert paste.owner_id == "u1"


def test_get_by_id_missing(repo: PasteRepository) -> None:
    with pytest.raises(NotFound):
        repo.get_by_id("nope")


def test_expired_paste_is_fetchable_but_not_listed(repo: PasteRepository) -> None:
    yesterday = to_iso(utcnow() - timedelta(days=1))
    repo.create(paste_id="old", content="body", expires_at=yesterday)
    repo.create(paste_id="live", content="body")

    assert [paste.id for paste in repo.list_candidates(PasteQuery())] == ["live"]
    assert repo.get_by_id("old").id == "old"


def test_list_candidates_filters_category_and_owner(repo: PasteRepository) -> None:
    repo.create(paste_id="a", content="body", category="Python", owner_id="u1")
    repo.create(paste_id="b", content="body", category="Rust", owner_id="u1")
    repo.create(paste_id="c", content="body", category="Python", owner_id="u2")

    found = repo.list_candidates(PasteQuery(category="Python", owner_id="u1"))
    assert [paste.id for paste in found] == ["a"]
    assert len(repo.list_candidates(PasteQuery(category="all"))) == 3


def test_delete_removes_comments_and_likes(repo: PasteRepository, db_session) -> None:
    repo.create(paste_id="p1", content="body")
    repo.add_comment("p1", "ann", "nice")
    repo.toggle_like("p1", "u1")

    repo.delete("p1")

    assert db_session.scalar(select(func.count()).select_from(Paste)) == 0
    assert db_session.scalar(select(func.count()).select_from(Comment)) == 0
    assert db_session.scalar(select(func.count()).select_from(PasteLike)) == 0
    with pytest.raises(NotFound):
        repo.delete("p1")
    with pytest.raises(NotFound):
        repo.delete("p1")


def test_set_pinned_requires_privileged_role(repo: PasteRepository) -> None:
    repo.create(paste_id="p1", content="body")

    with pytest.raises(Forbidden):
        repo.set_pinned("p1", True, "user")
    with pytest.raises(Forbidden):
        repo.set_pinned("p1", True, None)
    assert repo.get_by_id("p1").pinned is False

    for role in ("founder", "staff", "manager"):
        assert repo.set_pinned("p1", True, role).pinned is True
        assert repo.set_pinned("p1", False, role).pinned is False


def test_set_pinned_checks_role_before_existence(repo: PasteRepository) -> None:
    with pytest.raises(Forbidden):
        repo.set_pinned("missing", True, "user")
    with pytest.raises(NotFound):
        repo.set_pinned("missing", True, "founder")


def test_toggle_like_twice_restores_state(repo: PasteRepository, db_session) -> None:
    repo.create(paste_id="p1", content="body")

    assert repo.toggle_like("p1", "u1") == (True, 1)
    assert _like_users(db_session, "p1") == {"u1"}
    assert repo.toggle_like("p1", "u2") == (True, 2)
    assert repo.toggle_like("p1", "u1") == (False, 1)
    assert _like_users(db_session, "p1") == {"u2"}
    assert repo.toggle_like("p1", "u2") == (False, 0)
    assert _like_users(db_session, "p1") == set()


def test_toggle_like_validates_input(repo: PasteRepository) -> None:
    repo.create(paste_id="p1", content="body")
    with pytest.raises(InvalidInput):
        repo.toggle_like("p1", "")
    with pytest.raises(NotFound):
        repo.toggle_like("missing", "u1")


def test_toggle_like_repairs_drifted_counter(repo: PasteRepository) -> None:
    repo.create(paste_id="p1", content="body", likes=5)
    assert repo.toggle_like("p1", "u1") == (True, 1)


def test_comments_are_listed_oldest_first(repo: PasteRepository) -> None:
    repo.create(paste_id="p1", content="body")
    first = repo.add_comment("p1", "ann", "first")
    second = repo.add_comment("p1", None, "second")

    comments = repo.list_comments("p1")
    assert [comment.id for comment in comments] == [first.id, second.id]
    assert comments[1].author is None


def test_comment_validation(repo: PasteRepository) -> None:
    repo.create(paste_id="p1", content="body")
    with pytest.raises(InvalidInput):
        repo.add_comment("p1", "ann", "   ")
    with pytest.raises(NotFound):
        repo.add_comment("missing", "ann", "hello")
    with pytest.raises(NotFound):
        repo.list_comments("missing")


def test_delete_comment(repo: PasteRepository) -> None:
    repo.create(paste_id="p1", content="body")
    comment = repo.add_comment("p1", "ann", "bye")

    repo.delete_comment(comment.id)

    assert repo.list_comments("p1") == []
    with pytest.raises(NotFound):
        repo.delete_comment(comment.id)


def test_category_counts_skip_expired(repo: PasteRepository) -> None:
    yesterday = to_iso(utcnow() - timedelta(days=1))
    repo.create(paste_id="a", content="body", category="Python")
    repo.create(paste_id="b", content="body", category="Python")
    repo.create(paste_id="c", content="body", category="Rust")
    repo.create(paste_id="d", content="body", category="Rust", expires_at=yesterday)

    assert repo.category_counts() == {"Python": 2, "Rust": 1}


def test_sweep_expired_deletes_only_expired(repo: PasteRepository) -> None:
    now = utcnow()
    repo.create(paste_id="old", content="body", expires_at=to_iso(now - timedelta(minutes=5)))
    repo.create(paste_id="new", content="body", expires_at=to_iso(now + timedelta(minutes=5)))
    repo.create(paste_id="none", content="body")
    repo.add_comment("old", "ann", "soon gone")

    assert repo.sweep_expired(now) == 1
    assert sorted(paste.id for paste in repo.export_all()) == ["new", "none"]
    assert repo.sweep_expired(now) == 0


def test_export_all_includes_private_and_expired(repo: PasteRepository) -> None:
    yesterday = to_iso(utcnow() - timedelta(days=1))
    repo.create(paste_id="private", content="body", is_private=True, owner_id="u1")
    repo.create(paste_id="expired", content="body", expires_at=yesterday)

    assert sorted(paste.id for paste in repo.export_all()) == ["expired", "private"]
