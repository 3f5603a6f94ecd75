"""Service-level helpers for creating and listing pastes."""
from __future__ import annotations

from datetime import datetime

from snippetbin.db.time import utcnow
from snippetbin.models.paste import Paste
from snippetbin.repositories.paste_repo import PasteRepository
from snippetbin.schemas.paste import PasteCreate, PasteResponse
from snippetbin.services.ranking import PasteQuery, rank


def create_paste(*, repo: PasteRepository, payload: PasteCreate) -> Paste:
    """Persist a paste submitted through the API.

    Args:
        repo: Repository used to persist the paste.
        payload: Validated request body.

    Returns:
        The stored paste with server defaults filled in.
    """
    return repo.create(
        paste_id=payload.id,
        content=payload.content,
        title=payload.title,
        category=payload.category,
        tags=payload.tags,
        language=payload.language,
        date=payload.date,
        owner_id=payload.user_id,
        role=payload.role,
        is_private=payload.is_private,
        expires_at=payload.expires_at,
    )


def list_pastes(
    *,
    repo: PasteRepository,
    query: PasteQuery,
    now: datetime | None = None,
) -> list[Paste]:
    """Return the pastes a listing request should show, in display order.

    The repository narrows the candidate set; the ranking engine re-applies
    every filter against the same clock value and imposes the order.
    """
    now = now or utcnow()
    candidates = repo.list_candidates(query, now)
    return rank(candidates, query, now)


def to_paste_out(paste: Paste) -> PasteResponse:
    """Convert a Paste ORM instance to an API schema."""
    return PasteResponse.model_validate(paste)
