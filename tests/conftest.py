# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["SEED_DEFAULT_ACTIONS"] = "false"

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from slapboard.core.security import create_admin_token  # noqa: E402
from slapboard.core.settings import settings  # noqa: E402
from slapboard.db.session import Base, enable_sqlite_foreign_keys  # noqa: E402
from slapboard.db.session import get_db as app_get_session  # noqa: E402
from slapboard.main import app as fastapi_app  # noqa: E402
from slapboard.models import Action, Post, PostStatus, Vote  # noqa: E402
from slapboard.services.catalog import CatalogService  # noqa: E402

TEST_DB_URL = "sqlite://"

_ADDRESS_COUNTER = count(1)


class FakeClock:
    """Controllable replacement for `utcnow` in service tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def override_settings(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Temporarily change runtime settings; restored after the test."""

    def _override(**values: Any) -> None:
        for name, value in values.items():
            monkeypatch.setattr(settings, name, value)

    return _override


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def default_actions(db_session: Session) -> dict[str, Action]:
    """Seed the default actions and return them by name."""
    catalog = CatalogService(db_session)
    catalog.ensure_default_actions()
    return {action.name: action for action in catalog.list_actions()}


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Factory persisting posts directly, bypassing moderation."""

    def _make_post(
        name: str = "Ada Lovelace",
        category: str = "political",
        status: PostStatus = PostStatus.APPROVED,
        created_at: datetime | None = None,
    ) -> Post:
        post = Post(
            name=name,
            category=category,
            image_url=f"https://img.example/{name.lower().replace(' ', '-')}.jpg",
            status=status.value,
        )
        if created_at is not None:
            post.created_at = created_at
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def make_action(db_session: Session) -> Callable[..., Action]:
    """Factory persisting actions directly."""

    def _make_action(name: str, approved: bool = True) -> Action:
        action = Action(name=name, approved=approved, is_default=False)
        db_session.add(action)
        db_session.commit()
        db_session.refresh(action)
        return action

    return _make_action


@pytest.fixture()
def add_votes(db_session: Session) -> Callable[..., list[Vote]]:
    """Insert `n` votes from distinct addresses, as open mode would record them."""

    def _add_votes(
        post: Post,
        action: Action,
        n: int = 1,
        created_at: datetime | None = None,
    ) -> list[Vote]:
        votes = []
        for _ in range(n):
            seq = next(_ADDRESS_COUNTER)
            address = f"10.{seq // 65536 % 256}.{seq // 256 % 256}.{seq % 256}"
            vote = Vote(
                post_id=post.id,
                action_id=action.id,
                ip_address=address,
                voter_key=address,
                dedup_key=None,
            )
            if created_at is not None:
                vote.created_at = created_at
            votes.append(vote)
        db_session.add_all(votes)
        db_session.commit()
        return votes

    return _add_votes


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    """Return an Authorization header carrying a valid admin token."""
    return {"Authorization": f"Bearer {create_admin_token('moderator')}"}
