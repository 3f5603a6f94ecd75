# src/snippetbin/models/paste.py
"""SQLAlchemy models for pastes, likes and comments."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbin.db.session import Base
from snippetbin.db.time import utcnow_iso

DEFAULT_TITLE = "Untitled"
DEFAULT_CATEGORY = "Uncategorized"
TAG_SEPARATOR = ","


def normalize_tags(tags: Iterable[str] | str | None) -> list[str]:
    """Return tags trimmed, without empties or repeats, in first-seen order."""
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(TAG_SEPARATOR)
    seen: list[str] = []
    for tag in tags:
        cleaned = str(tag).strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


class Paste(Base):
    """A stored text snippet with its listing metadata.

    ``role`` is the owner's role when the paste was created; it is a snapshot,
    so later role changes do not reorder old pastes.
    """

    __tablename__ = "paste"
    __table_args__ = (
        Index("ix_paste_category", "category"),
        Index("ix_paste_owner_id", "owner_id"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_TITLE)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_CATEGORY)
    # Comma-joined at rest; use ``tag_list`` everywhere else.
    tags: Mapped[str] = mapped_column(Text, nullable=False, default="")
    language: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[str] = mapped_column(Text, nullable=False, default=utcnow_iso)
    owner_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="user")
    pinned: Mapped[bool] = mapped_column(default=False, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_private: Mapped[bool] = mapped_column(default=False, nullable=False)
    expires_at: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def tag_list(self) -> list[str]:
        return normalize_tags(self.tags)

    @tag_list.setter
    def tag_list(self, value: Iterable[str] | str | None) -> None:
        self.tags = TAG_SEPARATOR.join(normalize_tags(value))


class PasteLike(Base):
    """One user's like on one paste.

    The composite primary key allows at most one like per (paste, user).
    """

    __tablename__ = "paste_like"
    __table_args__ = (Index("ix_paste_like_paste_id", "paste_id"),)

    paste_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("paste.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=utcnow_iso)


class Comment(Base):
    """Free-standing comment attached to a single paste."""

    __tablename__ = "paste_comment"
    __table_args__ = (Index("ix_paste_comment_paste_id", "paste_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    paste_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("paste.id", ondelete="CASCADE"),
        nullable=False,
    )
    author: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[str] = mapped_column(Text, nullable=False, default=utcnow_iso)
