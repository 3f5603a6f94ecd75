"""Comment-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for adding a comment to a paste."""

    author: str | None = Field(None, max_length=100, description="Optional display name")
    content: str = Field(..., description="Comment text")


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    paste_id: str
    author: str | None
    content: str
    date: str

    model_config = ConfigDict(from_attributes=True)
