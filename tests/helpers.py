from fastapi.testclient import TestClient

from backend.app.services.object_store import S3ObjectStore

TEST_BUCKET = "test-bucket"


def make_object_store(**kwargs) -> S3ObjectStore:
    # pre-signing is computed locally, so dummy credentials never reach AWS
    return S3ObjectStore(
        bucket=TEST_BUCKET,
        region="us-east-1",
        access_key_id="testing",
        secret_access_key="testing",
        **kwargs,
    )


def customer_payload(**overrides) -> dict:
    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "jobTitle": "Analyst",
        "company": "Engines Ltd",
        "email": "ada@example.com",
        "phone": "+44 20 7946 0000",
        "address": {
            "street": "12 St James's Square",
            "city": "London",
            "state": "Greater London",
            "postalCode": "SW1Y 4JH",
            "country": "UK",
        },
    }
    payload.update(overrides)
    return payload


def note_payload(**overrides) -> dict:
    payload = {
        "title": "Follow up",
        "content": "Called client",
        "entityType": "Lead",
        "isPrivate": True,
    }
    payload.update(overrides)
    return payload


def create_customer(client: TestClient, **overrides) -> dict:
    resp = client.post("/v1/customers", json=customer_payload(**overrides))
    assert resp.status_code == 201
    return resp.json()


def create_note(client: TestClient, customer_id: str, **overrides) -> dict:
    resp = client.post(f"/v1/customers/{customer_id}/notes", json=note_payload(**overrides))
    assert resp.status_code == 201
    return resp.json()
