import pytest

from backend.app.core.metrics import reset_metrics
from backend.app.dependencies.store import get_object_store
from backend.app.main import app
from helpers import make_object_store


@pytest.fixture(autouse=True)
def object_store_override():
    store = make_object_store()
    app.dependency_overrides[get_object_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_object_store, None)


@pytest.fixture(autouse=True)
def clean_metrics():
    reset_metrics()
    yield
    reset_metrics()
