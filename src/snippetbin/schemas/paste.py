"""Paste-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PasteCreate(BaseModel):
    """Schema for creating a new paste.

    Only ``content`` is required; blank optional fields take the stored defaults.
    """

    id: str | None = Field(None, max_length=128, description="Client-generated paste id")
    title: str | None = Field(None, max_length=300, description="Display title")
    content: str = Field(..., description="Paste body")
    category: str | None = Field(None, max_length=100, description="Listing category")
    tags: list[str] | str | None = Field(
        None,
        description="Tags as a list or a comma-separated string",
    )
    language: str | None = Field(None, max_length=50, description="Syntax highlighting hint")
    date: str | None = Field(None, description="ISO 8601 creation time; server time when omitted")
    user_id: str | None = Field(None, description="Creating user's id")
    role: str | None = Field(None, description="Creating user's role at creation time")
    is_private: bool = Field(False, description="Hide from listings of other viewers")
    expires_at: str | None = Field(None, description="ISO 8601 expiry time")


class PasteResponse(BaseModel):
    """Schema for paste records returned by the API."""

    id: str
    title: str
    content: str
    category: str
    tags: list[str]
    language: str | None = None
    date: str
    user_id: str | None = None
    role: str
    pinned: bool
    views: int
    likes: int
    is_private: bool
    expires_at: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_orm_row(cls, data: object) -> object:
        if isinstance(data, (dict, BaseModel)):
            return data
        # ORM rows keep tags comma-joined and the owner under ``owner_id``.
        return {
            "id": data.id,
            "title": data.title,
            "content": data.content,
            "category": data.category,
            "tags": data.tag_list,
            "language": data.language,
            "date": data.date,
            "user_id": data.owner_id,
            "role": data.role,
            "pinned": bool(data.pinned),
            "views": int(data.views or 0),
            "likes": int(data.likes or 0),
            "is_private": bool(data.is_private),
            "expires_at": data.expires_at,
        }

    model_config = ConfigDict(from_attributes=True)


class PinRequest(BaseModel):
    """Schema for pinning or unpinning a paste."""

    pinned: bool = Field(..., description="Desired pinned state")
    role: str | None = Field(None, description="Role of the requesting user")


class LikeRequest(BaseModel):
    """Schema for toggling a like."""

    user_id: str | None = Field(None, description="Id of the liking user")


class LikeResponse(BaseModel):
    """Like state after a toggle."""

    liked: bool
    likes: int


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
