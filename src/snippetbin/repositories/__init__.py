"""Persistence repositories."""

from .paste_repo import PasteRepository, new_paste_id

__all__ = ["PasteRepository", "new_paste_id"]
