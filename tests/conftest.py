import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.services.asset_store import get_asset_store

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeAssetStore:
    """Records every call instead of touching the filesystem"""

    def __init__(self):
        self.stored = []
        self.replaced = []
        self.deleted = []

    def store(self, content, extension, container, content_type=None):
        reference = f"https://assets.test/{container}/{len(self.stored) + 1}{extension}"
        self.stored.append(reference)
        return reference

    def replace(self, content, extension, container, old_reference, content_type=None):
        self.replaced.append(old_reference)
        return self.store(content, extension, container, content_type)

    def delete(self, reference, container):
        self.deleted.append(reference)

    @property
    def untouched(self):
        return not (self.stored or self.replaced or self.deleted)


@pytest.fixture
def db_session():
    """Provide a clean database session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def asset_store():
    return FakeAssetStore()


@pytest.fixture
def client(db_session, asset_store):
    """FastAPI test client with the database and asset store dependencies overridden."""

    def override_get_db():
        test_db = TestingSessionLocal()
        try:
            yield test_db
        finally:
            test_db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_asset_store] = lambda: asset_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_asset_store, None)
