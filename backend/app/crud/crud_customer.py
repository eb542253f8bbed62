"""CRUD operations for customers in the single CRM table."""

import logging
import uuid
from typing import List, Optional

from backend.app.core.errors import CascadeDeleteError, CRMError
from backend.app.core.time import new_timestamp
from backend.app.db.store import TableStore
from backend.app.schemas.customer import CustomerCreate
from backend.app.services.keyspace import (
    CUSTOMER_TYPE,
    NOTE_PREFIX,
    customer_key,
    customer_pk,
    strip_keys,
)

logger = logging.getLogger(__name__)


class CRUDCustomer:
    def create(self, store: TableStore, *, obj_in: CustomerCreate) -> dict:
        customer_id = str(uuid.uuid4())
        now = new_timestamp()
        pk, sk = customer_key(customer_id)
        item = {
            "pk": pk,
            "sk": sk,
            "id": customer_id,
            **obj_in.model_dump(by_alias=True, mode="json"),
            "created": now,
            "updated": now,
            "type": CUSTOMER_TYPE,
        }
        store.put_item(item)
        return strip_keys(item)

    def get(self, store: TableStore, *, customer_id: str) -> Optional[dict]:
        item = store.get_item(*customer_key(customer_id))
        return strip_keys(item) if item else None

    def get_multi(self, store: TableStore) -> List[dict]:
        """Every customer, newest first."""
        return [strip_keys(item) for item in store.query_index(CUSTOMER_TYPE, ascending=False)]

    def delete(self, store: TableStore, *, customer_id: str) -> int:
        """Delete the customer's notes, then the customer; return the number of notes removed.

        Not atomic. Every note deletion is attempted; if any fails the customer
        item is kept and CascadeDeleteError lists the failures, so a retry
        picks up whatever is left.
        """
        notes = store.query_partition(customer_pk(customer_id), NOTE_PREFIX)
        failures: list[dict] = []
        deleted = 0
        for note in notes:
            try:
                store.delete_item(note["pk"], note["sk"])
            except CRMError as exc:
                logger.warning("Could not delete note %s of customer %s: %s", note.get("id"), customer_id, exc.message)
                failures.append({"noteId": note.get("id"), "error": exc.message})
            else:
                deleted += 1
        if failures:
            raise CascadeDeleteError(customer_id, failures)
        store.delete_item(*customer_key(customer_id))
        return deleted


customer_crud = CRUDCustomer()
