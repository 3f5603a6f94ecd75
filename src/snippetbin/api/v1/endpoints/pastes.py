# src/snippetbin/api/v1/endpoints/pastes.py
"""Paste-related endpoints for the SnippetBin API."""

from fastapi import APIRouter, Query, status

from snippetbin.api.v1.dependencies import PasteRepoDep
from snippetbin.schemas.comment import CommentCreate, CommentResponse
from snippetbin.schemas.paste import (
    LikeRequest,
    LikeResponse,
    MessageResponse,
    PasteCreate,
    PasteResponse,
    PinRequest,
)
from snippetbin.services.paste_service import create_paste, list_pastes, to_paste_out
from snippetbin.services.ranking import PasteQuery, SortMode

router = APIRouter(prefix="/pastes", tags=["pastes"])


@router.get("", response_model=list[PasteResponse])
def list_pastes_endpoint(
    repo: PasteRepoDep,
    search: str | None = Query(None, description="Substring of title, content or a tag"),
    category: str | None = Query(None, description="Exact category; 'all' disables the filter"),
    tag: str | None = Query(None, description="Substring of any single tag"),
    user_id: str | None = Query(None, description="Only pastes created by this user"),
    viewer_id: str | None = Query(None, description="Requesting user; reveals their private pastes"),
    sort: SortMode = Query(SortMode.DEFAULT, description="default, views or likes"),
) -> list[PasteResponse]:
    """List visible pastes in ranking order.

    Expired pastes are never listed. The default order puts pinned pastes
    first, then higher owner roles, then newer pastes.
    """
    query = PasteQuery(
        search=search,
        category=category,
        tag=tag,
        owner_id=user_id,
        viewer_id=viewer_id,
        sort=sort,
    )
    return [to_paste_out(paste) for paste in list_pastes(repo=repo, query=query)]


@router.get("/categories", response_model=dict[str, int])
def get_category_counts(repo: PasteRepoDep) -> dict[str, int]:
    """Return how many listed pastes each category holds."""
    return repo.category_counts()


@router.get("/{paste_id}", response_model=PasteResponse)
def get_paste(paste_id: str, repo: PasteRepoDep) -> PasteResponse:
    """Get a paste by id and count the view.

    Unlike listings, this does not hide expired pastes.
    """
    return to_paste_out(repo.get_by_id(paste_id))


@router.post("", response_model=PasteResponse, status_code=status.HTTP_201_CREATED)
def create_paste_endpoint(payload: PasteCreate, repo: PasteRepoDep) -> PasteResponse:
    """Create a paste and return the stored record with defaults applied."""
    return to_paste_out(create_paste(repo=repo, payload=payload))


@router.delete("/{paste_id}", response_model=MessageResponse)
def delete_paste(paste_id: str, repo: PasteRepoDep) -> MessageResponse:
    """Delete a paste together with its comments and likes."""
    repo.delete(paste_id)
    return MessageResponse(message="Paste deleted successfully")


@router.post("/{paste_id}/pin", response_model=MessageResponse)
def pin_paste(paste_id: str, payload: PinRequest, repo: PasteRepoDep) -> MessageResponse:
    """Pin or unpin a paste (founder, staff and manager only)."""
    repo.set_pinned(paste_id, payload.pinned, payload.role)
    action = "pinned" if payload.pinned else "unpinned"
    return MessageResponse(message=f"Paste {action} successfully")


@router.post("/{paste_id}/like", response_model=LikeResponse)
def toggle_like(paste_id: str, payload: LikeRequest, repo: PasteRepoDep) -> LikeResponse:
    """Like a paste, or remove the like if the user already liked it."""
    liked, likes = repo.toggle_like(paste_id, payload.user_id)
    return LikeResponse(liked=liked, likes=likes)


@router.get("/{paste_id}/comments", response_model=list[CommentResponse])
def list_comments(paste_id: str, repo: PasteRepoDep) -> list[CommentResponse]:
    """Return a paste's comments, oldest first."""
    return [CommentResponse.model_validate(comment) for comment in repo.list_comments(paste_id)]


@router.post(
    "/{paste_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(paste_id: str, payload: CommentCreate, repo: PasteRepoDep) -> CommentResponse:
    """Add a comment to a paste."""
    comment = repo.add_comment(paste_id, payload.author, payload.content)
    return CommentResponse.model_validate(comment)
