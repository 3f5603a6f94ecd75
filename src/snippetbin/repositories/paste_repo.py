"""Data access helpers for working with pastes, likes and comments."""
from __future__ import annotations

import logging
import secrets
from collections import Counter
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from snippetbin.core.errors import (
    DuplicateId,
    Forbidden,
    InvalidInput,
    NotFound,
    SnippetBinError,
    StorageFailure,
)
from snippetbin.core.roles import Role, can_pin
from snippetbin.db.session import begin_write
from snippetbin.db.time import parse_iso, to_iso, utcnow, utcnow_iso
from snippetbin.models.paste import (
    DEFAULT_CATEGORY,
    DEFAULT_TITLE,
    Comment,
    Paste,
    PasteLike,
    normalize_tags,
)
from snippetbin.services.ranking import PasteQuery, is_expired, matches

__all__ = ["PasteRepository", "new_paste_id"]

logger = logging.getLogger(__name__)

# Extra attempts after a (paste_id, user_id) uniqueness race in toggle_like.
LIKE_RETRY_LIMIT = 1


def new_paste_id() -> str:
    """Return a random URL-safe paste identifier."""
    return secrets.token_urlsafe(12)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _canonical_timestamp(field: str, value: str | None) -> str | None:
    """Return ``value`` in the stored ISO 8601 form, or None when blank."""
    if _blank(value):
        return None
    parsed = parse_iso(value)
    if parsed is None:
        raise InvalidInput(f"{field} must be an ISO 8601 timestamp")
    return to_iso(parsed)


class PasteRepository:
    """Transactional access to pastes and their likes and comments.

    Every mutating method runs in its own transaction and commits before
    returning. Counters are only ever changed with single SQL statements.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        try:
            begin_write(self.session)
            yield
            self.session.commit()
        except SnippetBinError:
            self.session.rollback()
            raise
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Storage failure while trying to %s: %s", action, exc)
            raise StorageFailure(f"Failed to {action}") from exc

    def _fetch(self, paste_id: str) -> Paste | None:
        return self.session.scalars(
            select(Paste)
            .where(Paste.id == paste_id)
            .execution_options(populate_existing=True)
        ).first()

    def _lock_paste(self, paste_id: str) -> None:
        """Take the paste's row lock for the rest of the transaction or raise NotFound."""
        row = self.session.execute(
            select(Paste.id).where(Paste.id == paste_id).with_for_update()
        ).first()
        if row is None:
            raise NotFound("Paste not found")

    def create(
        self,
        *,
        paste_id: str | None,
        content: str | None,
        title: str | None = None,
        category: str | None = None,
        tags: Iterable[str] | str | None = None,
        language: str | None = None,
        date: str | None = None,
        owner_id: str | None = None,
        role: Role | str | None = None,
        pinned: bool = False,
        views: int = 0,
        likes: int = 0,
        is_private: bool = False,
        expires_at: str | None = None,
    ) -> Paste:
        """Insert a new paste and return the stored record.

        Args:
            paste_id: Caller-chosen identifier; a random one is generated when blank.
            content: Body text; must contain a non-whitespace character.
            role: Owner role to snapshot for ranking; defaults to ``user``.

        Raises:
            InvalidInput: If content is empty or a timestamp is malformed.
            DuplicateId: If ``paste_id`` is already taken.
        """
        if _blank(content):
            raise InvalidInput("Content is required")
        paste_id = new_paste_id() if _blank(paste_id) else paste_id.strip()
        role_value = role.value if isinstance(role, Role) else (role or "").strip().lower()

        paste = Paste(
            id=paste_id,
            title=title if not _blank(title) else DEFAULT_TITLE,
            content=content,
            category=category if not _blank(category) else DEFAULT_CATEGORY,
            language=language if not _blank(language) else None,
            date=_canonical_timestamp("date", date) or utcnow_iso(),
            owner_id=owner_id if not _blank(owner_id) else None,
            role=role_value or Role.USER.value,
            pinned=bool(pinned),
            views=max(0, int(views)),
            likes=max(0, int(likes)),
            is_private=bool(is_private),
            expires_at=_canonical_timestamp("expires_at", expires_at),
        )
        paste.tag_list = normalize_tags(tags)

        with self._transaction("create paste"):
            if self.session.scalar(select(Paste.id).where(Paste.id == paste_id)) is not None:
                raise DuplicateId(f"Paste id {paste_id!r} already exists")
            self.session.add(paste)
            try:
                self.session.flush()
            except IntegrityError as exc:
                raise DuplicateId(f"Paste id {paste_id!r} already exists") from exc

        logger.info("Created paste %s in category %s", paste.id, paste.category)
        return paste

    def get_by_id(self, paste_id: str) -> Paste:
        """Return a paste and count the fetch as one view.

        Expiry is not checked here; expired pastes stay reachable by id.

        Raises:
            NotFound: If no paste has this id.
        """
        with self._transaction("fetch paste"):
            result = self.session.execute(
                update(Paste)
                .where(Paste.id == paste_id)
                .values(views=Paste.views + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFound("Paste not found")

        paste = self._fetch(paste_id)
        if paste is None:
            # Deleted between the increment and the read.
            raise NotFound("Paste not found")
        return paste

    def list_candidates(self, query: PasteQuery, now: datetime | None = None) -> list[Paste]:
        """Return unexpired pastes matching ``query``, in no particular order."""
        now = now or utcnow()
        stmt = select(Paste).where(
            or_(
                Paste.expires_at.is_(None),
                Paste.expires_at == "",
                Paste.expires_at >= to_iso(now),
            )
        )
        if query.category_filter is not None:
            stmt = stmt.where(Paste.category == query.category_filter)
        if query.owner_id:
            stmt = stmt.where(Paste.owner_id == query.owner_id)

        try:
            rows = self.session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Storage failure while listing pastes: %s", exc)
            raise StorageFailure("Failed to fetch pastes") from exc
        # Tag and text search run on the decoded tag list rather than the joined column.
        return [paste for paste in rows if matches(paste, query, now)]

    def delete(self, paste_id: str) -> None:
        """Delete a paste along with its comments and likes.

        Raises:
            NotFound: If no paste has this id, including on a repeated delete.
        """
        with self._transaction("delete paste"):
            self.session.execute(
                delete(PasteLike)
                .where(PasteLike.paste_id == paste_id)
                .execution_options(synchronize_session=False)
            )
            self.session.execute(
                delete(Comment)
                .where(Comment.paste_id == paste_id)
                .execution_options(synchronize_session=False)
            )
            result = self.session.execute(
                delete(Paste)
                .where(Paste.id == paste_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFound("Paste not found")
        logger.info("Deleted paste %s", paste_id)

    def set_pinned(self, paste_id: str, pinned: bool, requester_role: Role | str | None) -> Paste:
        """Pin or unpin a paste on behalf of a privileged role.

        Raises:
            Forbidden: If ``requester_role`` is not founder, staff or manager.
            NotFound: If no paste has this id.
        """
        if not can_pin(requester_role):
            raise Forbidden("Only founder, staff, and managers can pin posts")

        with self._transaction("pin paste"):
            result = self.session.execute(
                update(Paste)
                .where(Paste.id == paste_id)
                .values(pinned=bool(pinned))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFound("Paste not found")

        logger.info("Paste %s %s by %s", paste_id, "pinned" if pinned else "unpinned", requester_role)
        paste = self._fetch(paste_id)
        if paste is None:
            raise NotFound("Paste not found")
        return paste

    def _toggle_like_once(self, paste_id: str, user_id: str) -> tuple[bool, int]:
        self._lock_paste(paste_id)
        removed = self.session.execute(
            delete(PasteLike)
            .where(PasteLike.paste_id == paste_id, PasteLike.user_id == user_id)
            .execution_options(synchronize_session=False)
        ).rowcount
        if not removed:
            self.session.execute(
                insert(PasteLike).values(
                    paste_id=paste_id,
                    user_id=user_id,
                    created_at=utcnow_iso(),
                )
            )

        like_count = (
            select(func.count())
            .select_from(PasteLike)
            .where(PasteLike.paste_id == paste_id)
            .scalar_subquery()
        )
        self.session.execute(
            update(Paste)
            .where(Paste.id == paste_id)
            .values(likes=like_count)
            .execution_options(synchronize_session=False)
        )
        likes = self.session.scalar(select(Paste.likes).where(Paste.id == paste_id))
        return not removed, int(likes or 0)

    def toggle_like(self, paste_id: str, user_id: str | None) -> tuple[bool, int]:
        """Like the paste for ``user_id`` or remove that user's existing like.

        The like row change and the counter refresh share one transaction, and
        the counter is recomputed from the like rows rather than adjusted.

        Returns:
            ``(liked, likes)``: whether the user now likes the paste and the new total.

        Raises:
            InvalidInput: If ``user_id`` is blank.
            NotFound: If no paste has this id.
        """
        if _blank(user_id):
            raise InvalidInput("user_id is required")
        user_id = user_id.strip()

        attempts = 0
        while True:
            attempts += 1
            try:
                begin_write(self.session)
                liked, likes = self._toggle_like_once(paste_id, user_id)
                self.session.commit()
                return liked, likes
            except IntegrityError as exc:
                self.session.rollback()
                if attempts > LIKE_RETRY_LIMIT:
                    logger.error("Like toggle on %s kept conflicting: %s", paste_id, exc)
                    raise StorageFailure("Failed to toggle like") from exc
                logger.info("Concurrent like on %s by %s, retrying", paste_id, user_id)
            except SnippetBinError:
                self.session.rollback()
                raise
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.error("Storage failure while toggling like on %s: %s", paste_id, exc)
                raise StorageFailure("Failed to toggle like") from exc

    def list_comments(self, paste_id: str) -> list[Comment]:
        """Return a paste's comments, oldest first.

        Raises:
            NotFound: If no paste has this id.
        """
        if self.session.get(Paste, paste_id) is None:
            raise NotFound("Paste not found")
        return list(
            self.session.scalars(
                select(Comment)
                .where(Comment.paste_id == paste_id)
                .order_by(Comment.date.asc(), Comment.id.asc())
            )
        )

    def add_comment(self, paste_id: str, author: str | None, content: str | None) -> Comment:
        """Append a comment stamped with the server time.

        Raises:
            InvalidInput: If content is empty.
            NotFound: If no paste has this id.
        """
        if _blank(content):
            raise InvalidInput("Comment content is required")

        comment = Comment(
            paste_id=paste_id,
            author=author.strip() if not _blank(author) else None,
            content=content,
            date=utcnow_iso(),
        )
        with self._transaction("add comment"):
            self._lock_paste(paste_id)
            self.session.add(comment)
            self.session.flush()
        return comment

    def delete_comment(self, comment_id: int) -> None:
        """Delete a single comment.

        Raises:
            NotFound: If no comment has this id.
        """
        with self._transaction("delete comment"):
            result = self.session.execute(
                delete(Comment)
                .where(Comment.id == comment_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFound("Comment not found")

    def category_counts(self, now: datetime | None = None) -> dict[str, int]:
        """Return listed (unexpired) paste counts per category."""
        counts = Counter(paste.category for paste in self.list_candidates(PasteQuery(), now))
        return dict(sorted(counts.items()))

    def sweep_expired(self, now: datetime | None = None) -> int:
        """Delete every paste whose expiry has passed and return how many were removed."""
        now = now or utcnow()
        candidates = self.session.scalars(
            select(Paste).where(Paste.expires_at.is_not(None), Paste.expires_at != "")
        ).all()
        expired_ids = [paste.id for paste in candidates if is_expired(paste, now)]
        if not expired_ids:
            return 0

        with self._transaction("sweep expired pastes"):
            self.session.execute(
                delete(PasteLike)
                .where(PasteLike.paste_id.in_(expired_ids))
                .execution_options(synchronize_session=False)
            )
            self.session.execute(
                delete(Comment)
                .where(Comment.paste_id.in_(expired_ids))
                .execution_options(synchronize_session=False)
            )
            self.session.execute(
                delete(Paste)
                .where(Paste.id.in_(expired_ids))
                .execution_options(synchronize_session=False)
            )
        logger.info("Swept %d expired pastes", len(expired_ids))
        return len(expired_ids)

    def export_all(self) -> list[Paste]:
        """Return every stored paste, expired and private ones included."""
        return list(self.session.scalars(select(Paste).order_by(Paste.date.asc(), Paste.id.asc())))
