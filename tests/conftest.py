# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Must be set before the application modules read their settings.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BACKUP_ENABLED", "false")
os.environ.setdefault("EXPIRED_SWEEP_ENABLED", "false")

from snippetbin.api.v1.dependencies import get_session_factory
from snippetbin.db.session import Base, build_engine
from snippetbin.db.session import get_db as app_get_session
from snippetbin.main import app as fastapi_app
from snippetbin.models import Paste
from snippetbin.repositories.paste_repo import PasteRepository

TEST_DB_URL = "sqlite://"

_PASTE_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Callable[[], Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture()
def db_session(session_factory: Callable[[], Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def repo(db_session: Session) -> PasteRepository:
    return PasteRepository(db_session)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def override_session_dependency(
    app: FastAPI,
    session_factory: Callable[[], Session],
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_session_factory, None)


@pytest.fixture()
def client(app: FastAPI, override_session_dependency: None) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_paste(session_factory: Callable[[], Session]) -> Callable[..., Paste]:
    """Persist a paste through the repository in its own short-lived session.

    API tests use this instead of ``db_session`` so no session stays open
    while the client runs requests.
    """

    def _make(**overrides: Any) -> Paste:
        fields: dict[str, Any] = {
            "paste_id": f"paste-{next(_PASTE_COUNTER)}",
            "content": "print('hello')",
            "title": "Hello",
            "category": "Python",
        }
        fields.update(overrides)
        with session_factory() as session:
            return PasteRepository(session).create(**fields)

    return _make
