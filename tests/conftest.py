# tests/conftest.py
from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator, Iterator
from unittest.mock import MagicMock

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pulse_stage.api.v1.dependencies import get_storage_dep
from pulse_stage.core.security import create_access_token, hash_password
from pulse_stage.core.settings import Settings
from pulse_stage.db.session import Base, build_engine, create_tables
from pulse_stage.db.session import get_db as app_get_session
from pulse_stage.main import app as fastapi_app
from pulse_stage.models import Post, User
from pulse_stage.repositories.engagement_repo import EngagementRepository
from pulse_stage.services.engagement import EngagementLedger
from pulse_stage.services.storage import ObjectStorage

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "Str0ng!pass"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    create_tables(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
        # Services commit for real; wipe every table so each test starts clean.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def storage_client() -> MagicMock:
    """Stand-in for the boto3 S3 client."""
    return MagicMock(name="s3_client")


@pytest.fixture()
def object_storage(storage_client: MagicMock) -> ObjectStorage:
    config = Settings(AWS_S3_BUCKET="pulse-test", AWS_S3_REGION="eu-west-1")  # type: ignore[call-arg]
    return ObjectStorage(config, client=storage_client)


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    session_factory: sessionmaker[Session],
    object_storage: ObjectStorage,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    previous_factory = app.state.session_factory
    app.state.session_factory = session_factory
    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_storage_dep] = lambda: object_storage
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_storage_dep, None)
        app.state.session_factory = previous_factory


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def user_password() -> str:
    """Password shared by every user built with ``make_user``."""
    return TEST_PASSWORD


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with a known password."""
    password_hash = hash_password(TEST_PASSWORD)

    def _make_user(email: str | None = None, *, is_deleted: bool = False) -> User:
        user = User(
            id=uuid.uuid4(),
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=password_hash,
            is_deleted=is_deleted,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory persisting posts for a given author."""

    def _make_post(author: User, content: str = "Test post content", *, is_deleted: bool = False) -> Post:
        post = Post(id=uuid.uuid4(), author_id=author.id, content=content, is_deleted=is_deleted)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user("alice@example.com")


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user("bob@example.com")


@pytest.fixture()
def carol(make_user: Callable[..., User]) -> User:
    return make_user("carol@example.com")


@pytest.fixture()
def alice_post(make_post: Callable[..., Post], alice: User) -> Post:
    """Post P1 authored by alice."""
    return make_post(alice, "Hello from alice")


@pytest.fixture()
def ledger(db_session: Session) -> EngagementLedger:
    return EngagementLedger(EngagementRepository(db_session))


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(str(user.id), email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return a helper building bearer headers for any user."""
    return auth_headers


@pytest.fixture()
def alice_headers(alice: User) -> dict[str, str]:
    return auth_headers(alice)


@pytest.fixture()
def bob_headers(bob: User) -> dict[str, str]:
    return auth_headers(bob)


@pytest.fixture()
def carol_headers(carol: User) -> dict[str, str]:
    return auth_headers(carol)
