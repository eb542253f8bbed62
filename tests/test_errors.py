import pytest
from fastapi.testclient import TestClient

from backend.app.core.errors import InternalError, StoreError
from backend.app.core.metrics import get_metrics, track_operation
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.db.store import SqlTableStore
from backend.app.dependencies.store import get_store
from backend.app.main import app
from backend.app.models.item import TableItem
from helpers import create_customer, create_note


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.pop(get_store, None)


class FailingDeleteStore(SqlTableStore):
    """SQL store whose deletes fail for the listed sort keys."""

    def __init__(self, failing_sort_keys: set[str]):
        super().__init__(SessionLocal)
        self.failing_sort_keys = failing_sort_keys

    def delete_item(self, pk, sk):
        if sk in self.failing_sort_keys:
            raise StoreError(f"Failed to delete item {pk}/{sk}")
        super().delete_item(pk, sk)


class BrokenStore(SqlTableStore):
    def __init__(self):
        super().__init__(SessionLocal)

    def query_index(self, type_value, *, ascending=False):
        raise RuntimeError("connection reset")


class UnavailableStore(SqlTableStore):
    def __init__(self):
        super().__init__(SessionLocal)

    def query_index(self, type_value, *, ascending=False):
        raise StoreError("Failed to query index for type CUSTOMER")


def test_cascade_delete_keeps_customer_when_a_note_fails():
    client = TestClient(app)
    customer = create_customer(client)
    kept = create_note(client, customer["id"], title="Stuck")["note"]
    create_note(client, customer["id"], title="Gone")

    app.dependency_overrides[get_store] = lambda: FailingDeleteStore(
        {f"NOTE#{kept['created']}#{kept['id']}"}
    )
    resp = client.delete(f"/v1/customers/{customer['id']}")
    assert resp.status_code == 500
    body = resp.json()
    assert body["failures"] == [
        {"noteId": kept["id"], "error": f"Failed to delete item CUSTOMER#{customer['id']}/NOTE#{kept['created']}#{kept['id']}"}
    ]
    assert get_metrics()["DeleteCustomerError"] == 1

    app.dependency_overrides.pop(get_store)
    assert client.get(f"/v1/customers/{customer['id']}").status_code == 200
    remaining = client.get(f"/v1/customers/{customer['id']}/notes").json()
    assert [n["id"] for n in remaining] == [kept["id"]]

    # retry once the store recovers
    resp = client.delete(f"/v1/customers/{customer['id']}")
    assert resp.status_code == 200
    assert resp.json()["deletedNotes"] == 1


def test_store_failure_surfaces_as_server_error():
    client = TestClient(app)
    app.dependency_overrides[get_store] = lambda: UnavailableStore()
    resp = client.get("/v1/customers")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to query index for type CUSTOMER"}
    assert get_metrics() == {"GetAllCustomersError": 1}


def test_payload_validation_is_counted():
    client = TestClient(app)
    resp = client.post("/v1/customers", json={})
    assert resp.status_code == 422
    assert resp.json()["error"] == "Invalid request payload"
    assert get_metrics() == {"RequestValidationError": 1}


def test_successful_operations_are_counted():
    client = TestClient(app)
    customer = create_customer(client)
    create_note(client, customer["id"])
    client.get(f"/v1/customers/{customer['id']}/notes")
    metrics = get_metrics()
    assert metrics["SuccessfulCreateCustomer"] == 1
    assert metrics["SuccessfulCreateNote"] == 1
    assert metrics["SuccessfulGetNotes"] == 1


def test_track_operation_keeps_typed_errors(caplog):
    with pytest.raises(StoreError):
        with track_operation("Example"):
            raise StoreError("store down")
    assert get_metrics() == {"ExampleError": 1}


def test_track_operation_wraps_unexpected_errors(caplog):
    with pytest.raises(InternalError) as excinfo:
        with track_operation("Example", note_id="n1"):
            raise RuntimeError("boom")
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert get_metrics() == {"ExampleError": 1}
    record = next(r for r in caplog.records if r.getMessage() == "Example failed: boom")
    assert record.extra_data == {"operation": "Example", "note_id": "n1"}


def test_unexpected_failure_is_shaped_and_keeps_cors_headers():
    client = TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides[get_store] = lambda: BrokenStore()
    resp = client.get("/v1/customers", headers={"Origin": "https://crm.example.com"})
    assert resp.status_code == 500
    assert resp.headers["content-type"] == "application/json"
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.json() == {"error": "Internal server error"}
    assert get_metrics() == {"GetAllCustomersError": 1}


def test_corrupted_item_is_shaped_as_server_error():
    client = TestClient(app, raise_server_exceptions=False)
    with SessionLocal() as db:
        db.add(
            TableItem(
                pk="CUSTOMER#broken",
                sk="METADATA",
                type="CUSTOMER",
                created="2025-01-01T00:00:00.000000Z",
                attributes={"type": "CUSTOMER", "created": "2025-01-01T00:00:00.000000Z"},
            )
        )
        db.commit()
    resp = client.get("/v1/customers", headers={"Origin": "https://crm.example.com"})
    assert resp.status_code == 500
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.json() == {"error": "Internal server error"}
    assert get_metrics()["ResponseValidationError"] == 1
