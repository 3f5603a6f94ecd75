"""Shared API dependencies."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from snippetbin.db.session import SessionLocal, get_db
from snippetbin.repositories.paste_repo import PasteRepository
from snippetbin.services.auth_service import AuthService

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_session_factory() -> Callable[[], Session]:
    """Return the factory background jobs use to open their own sessions."""
    return SessionLocal


def get_paste_repo(db: SessionDep) -> PasteRepository:
    """Return a paste repository bound to the request's session."""
    return PasteRepository(db)


def get_auth_service(db: SessionDep) -> AuthService:
    """Return an authenticator bound to the request's session."""
    return AuthService(db)


PasteRepoDep = Annotated[PasteRepository, Depends(get_paste_repo)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
SessionFactoryDep = Annotated[Callable[[], Session], Depends(get_session_factory)]
