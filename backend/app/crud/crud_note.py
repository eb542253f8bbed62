"""CRUD operations for customer notes and their attachment URLs."""

import uuid
from typing import List, Optional, Tuple

from backend.app.core.errors import (
    NothingToUpdateError,
    ResourceNotFoundError,
    ValidationError,
)
from backend.app.core.time import new_timestamp
from backend.app.crud.crud_customer import customer_crud
from backend.app.db.store import TableStore
from backend.app.schemas.note import NoteCreate, NoteUpdate
from backend.app.services.keyspace import (
    NOTE_PREFIX,
    NOTE_TYPE,
    attachment_key,
    customer_pk,
    note_key,
    strip_keys,
)
from backend.app.services.object_store import ObjectStore


class CRUDNote:
    def create(
        self,
        store: TableStore,
        object_store: ObjectStore,
        *,
        customer_id: str,
        obj_in: NoteCreate,
    ) -> Tuple[dict, Optional[str]]:
        """Write a new note; return it with an upload URL when a filename was given."""
        if customer_crud.get(store, customer_id=customer_id) is None:
            raise ResourceNotFoundError("Customer not found")

        note_id = str(uuid.uuid4())
        now = new_timestamp()
        pk, sk = note_key(customer_id, now, note_id)
        item = {
            "pk": pk,
            "sk": sk,
            "id": note_id,
            "customerId": customer_id,
            **obj_in.model_dump(by_alias=True, exclude={"filename"}),
            "created": now,
            "updated": now,
            "type": NOTE_TYPE,
        }
        upload_url = None
        if obj_in.filename:
            key = attachment_key(customer_id, note_id, obj_in.filename)
            # sign before writing so a signing failure leaves no note behind
            upload_url = object_store.presign_upload(key)
            item["attachmentKey"] = key
            item["filename"] = obj_in.filename
        store.put_item(item)
        return strip_keys(item), upload_url

    def get_multi(self, store: TableStore, *, customer_id: str) -> List[dict]:
        """A customer's notes in creation order."""
        items = store.query_partition(customer_pk(customer_id), NOTE_PREFIX, ascending=True)
        return [strip_keys(item) for item in items]

    def locate(self, store: TableStore, *, customer_id: str, note_id: str) -> dict:
        """Resolve a note id to its stored item, keys included.

        The sort key embeds the creation time, so the id alone does not
        address the item: query the partition and filter on ``id``.
        """
        items = store.query_partition(customer_pk(customer_id), NOTE_PREFIX, filters={"id": note_id})
        if not items:
            raise ResourceNotFoundError("Note not found")
        return items[0]

    def get(self, store: TableStore, *, customer_id: str, note_id: str) -> dict:
        return strip_keys(self.locate(store, customer_id=customer_id, note_id=note_id))

    def update(self, store: TableStore, *, customer_id: str, note_id: str, obj_in: NoteUpdate) -> dict:
        item = self.locate(store, customer_id=customer_id, note_id=note_id)
        changes = obj_in.changes()
        if not changes:
            raise NothingToUpdateError()
        key = changes.get("attachmentKey")
        # the key is fully determined by the note and the filename
        if key is not None and key != attachment_key(customer_id, note_id, changes["filename"]):
            raise ValidationError("attachmentKey does not match this note and filename")
        changes["updated"] = new_timestamp()
        updated = store.update_item(item["pk"], item["sk"], changes)
        return strip_keys(updated)

    def delete(self, store: TableStore, *, customer_id: str, note_id: str) -> dict:
        item = self.locate(store, customer_id=customer_id, note_id=note_id)
        store.delete_item(item["pk"], item["sk"])
        return strip_keys(item)

    def attachment_url(
        self,
        store: TableStore,
        object_store: ObjectStore,
        *,
        customer_id: str,
        note_id: str,
        verify: bool = False,
    ) -> Tuple[str, Optional[str]]:
        """Return a download URL and the original filename of a note's attachment.

        With ``verify`` the object must exist in storage; otherwise the stored
        key is trusted, which may point at an upload that never happened.
        """
        note = self.locate(store, customer_id=customer_id, note_id=note_id)
        key = note.get("attachmentKey")
        if not key:
            raise ResourceNotFoundError("Note has no attachment")
        if verify and not object_store.exists(key):
            raise ResourceNotFoundError("Attachment has not been uploaded")
        filename = note.get("filename")
        return object_store.presign_download(key, filename=filename), filename


note_crud = CRUDNote()
