import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import Database
from app.documents.storage import LocalFileStorage
from app.main import create_app


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
    )


@pytest.fixture
def database(test_settings):
    database = Database(test_settings.DATABASE_URL)
    database.connect()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(test_settings):
    return LocalFileStorage(test_settings.UPLOAD_DIR)


@pytest.fixture
def client(test_settings, database, storage):
    app = create_app(test_settings, database=database, storage=storage)
    with TestClient(app) as c:
        yield c
