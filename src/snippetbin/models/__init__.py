# src/snippetbin/models/__init__.py
"""SQLAlchemy models for the SnippetBin application."""

from .paste import Comment, Paste, PasteLike
from .user import User, UserProfile

__all__ = [
    "Comment",
    "Paste",
    "PasteLike",
    "User",
    "UserProfile",
]
