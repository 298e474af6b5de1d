import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Store
from main import create_app
from seed import seed_if_empty


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'data' / 'test.db'}"


@pytest.fixture
def store(database_url):
    store = Store(database_url)
    store.create_tables()
    yield store
    store.dispose()


@pytest.fixture
def seeded(store):
    seed_if_empty(store)
    return store


@pytest.fixture
def settings(tmp_path, database_url):
    return Settings(
        database_url=database_url,
        seed_demo=False,
        static_dir=str(tmp_path / "public"),
        live_url="https://bistro.example.com",
        api_base="https://bistro.example.com/api",
    )


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store)
    with TestClient(app) as c:
        yield c
