"""
Shared pytest fixtures.

Uses a throwaway SQLite file for anything that needs the database, and an
in-memory document storage for the API so each test starts from defaults.
"""
import copy

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from yeartrace.db.base import Base, get_db
from yeartrace.main import create_app
from yeartrace.schemas.domain import YeartraceSettings
from yeartrace.services.defaults import default_settings
from yeartrace.services.records_store import RecordsStore

SQLITE_URL = "sqlite:///./test_yeartrace.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class MemoryDataStorage:
    """DataStorage double keeping the document in a dict."""

    def __init__(self, document=None):
        self.document = copy.deepcopy(document)
        self.saves = 0

    async def load_data(self):
        return copy.deepcopy(self.document)

    async def save_data(self, document):
        self.document = copy.deepcopy(document)
        self.saves += 1


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    import yeartrace.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def settings() -> YeartraceSettings:
    return default_settings()


@pytest.fixture()
def store(settings) -> RecordsStore:
    return RecordsStore(lambda: settings)


@pytest.fixture()
def memory_storage():
    """Factory: memory_storage(document=None) -> MemoryDataStorage."""
    return MemoryDataStorage


@pytest.fixture()
def session_factory():
    return TestingSessionLocal


@pytest.fixture()
def storage():
    return MemoryDataStorage()


@pytest.fixture()
def client(storage):
    app = create_app(storage=storage)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
