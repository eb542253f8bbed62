import pytest
from botocore.exceptions import EndpointConnectionError
from botocore.stub import Stubber

from backend.app.core.errors import ObjectStoreError
from helpers import make_object_store

KEY = "notes/c1/attachments/n1/report.pdf"


@pytest.fixture
def object_store():
    return make_object_store()


@pytest.fixture
def stubber(object_store):
    with Stubber(object_store._client()) as stub:
        yield stub
        stub.assert_no_pending_responses()


def test_exists_when_head_succeeds(object_store, stubber):
    stubber.add_response("head_object", {}, {"Bucket": "test-bucket", "Key": KEY})
    assert object_store.exists(KEY) is True


@pytest.mark.parametrize("code", ["404", "403"])
def test_missing_or_forbidden_object_is_absent(object_store, stubber, code):
    stubber.add_client_error("head_object", service_error_code=code, http_status_code=int(code))
    assert object_store.exists(KEY) is False


def test_other_client_errors_are_typed(object_store, stubber):
    stubber.add_client_error("head_object", service_error_code="500", http_status_code=500)
    with pytest.raises(ObjectStoreError):
        object_store.exists(KEY)


def test_connection_errors_are_typed(object_store, monkeypatch):
    def unreachable(**kwargs):
        raise EndpointConnectionError(endpoint_url="https://test-bucket.s3.amazonaws.com")

    monkeypatch.setattr(object_store._client(), "head_object", unreachable)
    with pytest.raises(ObjectStoreError):
        object_store.exists(KEY)
