import pytest
from fastapi.testclient import TestClient

from cli_metrics.main import create_app
from cli_metrics.store import MEMORY, RecordStore


@pytest.fixture()
def store():
    # Isolated in-memory database per test (StaticPool keeps one connection)
    store = RecordStore.open(MEMORY)
    store.create_schema()
    try:
        yield store
    finally:
        store.close()


@pytest.fixture()
def client(store):
    return TestClient(create_app(store))
