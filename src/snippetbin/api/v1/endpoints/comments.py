# src/snippetbin/api/v1/endpoints/comments.py
"""Comment endpoints addressed by comment id."""

from fastapi import APIRouter

from snippetbin.api.v1.dependencies import PasteRepoDep
from snippetbin.schemas.paste import MessageResponse

router = APIRouter(prefix="/comments", tags=["comments"])


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(comment_id: int, repo: PasteRepoDep) -> MessageResponse:
    """Delete a single comment."""
    repo.delete_comment(comment_id)
    return MessageResponse(message="Comment deleted successfully")
