"""
Test fixtures for lumina blog tests.

Provides an in-memory database, an in-memory object store, a TestClient
wired to both, and sample data.
"""

import json
import pytest
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.models import Post, Category
from app.services.storage import InMemoryObjectStore

TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_SECRET = "test-secret"
TEST_PUBLIC_DOMAIN = "https://cdn.example.test/"


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Pin auth secret and public asset domain for every test."""
    monkeypatch.setattr(settings, "AUTH_SECRET", TEST_SECRET)
    monkeypatch.setattr(settings, "R2_PUBLIC_DOMAIN", TEST_PUBLIC_DOMAIN)
    yield settings


@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Generator[Session, None, None]:
    """Provide a test database session."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture(scope="function")
def client(test_engine, object_store):
    """Create test client with test database and in-memory object store."""
    from app.main import app
    from app.db import get_session
    from app.api.deps import get_store

    def override_get_session():
        with Session(test_engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_store] = lambda: object_store

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {TEST_SECRET}"}


@pytest.fixture
def sample_categories(test_session: Session) -> List[Category]:
    """A root category with one child, plus an unrelated leaf."""
    categories = [
        Category(id="100", name="Teaching", parent_id=None),
        Category(id="101", name="Sermons", parent_id="100"),
        Category(id="102", name="Notes", parent_id=None),
    ]
    for c in categories:
        test_session.add(c)
    test_session.commit()
    return categories


@pytest.fixture
def sample_posts(test_session: Session, sample_categories: List[Category]) -> List[Post]:
    """Three posts with distinct creation times; one filed under Sermons."""
    posts = [
        Post(
            id="p1",
            title="Oldest",
            excerpt="first",
            content="# First",
            created_at=1_700_000_000_000,
            updated_at=1_700_000_000_000,
            category_id="101",
            tags=json.dumps(["faith", "notes"]),
            is_featured=1,
            author_name="Grace",
        ),
        Post(
            id="p2",
            title="Middle",
            excerpt="second",
            content="# Second",
            created_at=1_700_000_100_000,
            updated_at=1_700_000_100_000,
            category_id="",
            tags=None,
            is_featured=0,
            author_name=None,
        ),
        Post(
            id="p3",
            title="Newest",
            excerpt="third",
            content="# Third",
            created_at=1_700_000_200_000,
            updated_at=1_700_000_200_000,
            category_id="",
            tags="not json",
            is_featured=0,
            author_name="Admin",
        ),
    ]
    for p in posts:
        test_session.add(p)
    test_session.commit()
    return posts
