# src/snippetbin/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse
from .paste import LikeRequest, LikeResponse, MessageResponse, PasteCreate, PasteResponse, PinRequest
from .user import AuthResponse, LoginRequest, ProfileOut, SignupRequest, UserOut

__all__ = [
    "AuthResponse",
    "CommentCreate", "CommentResponse",
    "LikeRequest", "LikeResponse",
    "LoginRequest",
    "MessageResponse",
    "PasteCreate", "PasteResponse",
    "PinRequest",
    "ProfileOut",
    "SignupRequest",
    "UserOut",
]
