"""Customer notes endpoints, including attachment upload/download URLs."""

from fastapi import APIRouter, Depends

from backend.app.core.metrics import track_operation
from backend.app.core.settings import get_settings
from backend.app.crud.crud_note import note_crud
from backend.app.db.store import TableStore
from backend.app.dependencies.store import get_object_store, get_store
from backend.app.schemas.note import (
    AttachmentDownload,
    NoteCreate,
    NoteCreated,
    NoteDeleted,
    NoteRead,
    NoteUpdate,
)
from backend.app.services.object_store import ObjectStore

router = APIRouter(prefix="/v1/customers/{customer_id}/notes", tags=["notes"])


@router.post("", response_model=NoteCreated, status_code=201)
def create_note(
    customer_id: str,
    note_in: NoteCreate,
    store: TableStore = Depends(get_store),
    object_store: ObjectStore = Depends(get_object_store),
):
    with track_operation("CreateNote", customer_id=customer_id):
        note, upload_url = note_crud.create(store, object_store, customer_id=customer_id, obj_in=note_in)
        return {
            "note": note,
            "uploadUrl": upload_url,
            "expiresIn": object_store.expires_in if upload_url else None,
        }


@router.get("", response_model=list[NoteRead])
def list_notes(customer_id: str, store: TableStore = Depends(get_store)):
    with track_operation("GetNotes", customer_id=customer_id):
        return note_crud.get_multi(store, customer_id=customer_id)


@router.get("/{note_id}", response_model=NoteRead)
def get_note(customer_id: str, note_id: str, store: TableStore = Depends(get_store)):
    with track_operation("GetNote", customer_id=customer_id, note_id=note_id):
        return note_crud.get(store, customer_id=customer_id, note_id=note_id)


@router.patch("/{note_id}", response_model=NoteRead)
def update_note(
    customer_id: str,
    note_id: str,
    note_in: NoteUpdate,
    store: TableStore = Depends(get_store),
):
    with track_operation("UpdateNote", customer_id=customer_id, note_id=note_id):
        return note_crud.update(store, customer_id=customer_id, note_id=note_id, obj_in=note_in)


@router.delete("/{note_id}", response_model=NoteDeleted)
def delete_note(customer_id: str, note_id: str, store: TableStore = Depends(get_store)):
    with track_operation("DeleteNote", customer_id=customer_id, note_id=note_id):
        note_crud.delete(store, customer_id=customer_id, note_id=note_id)
        return {"status": "deleted", "id": note_id}


@router.get("/{note_id}/attachment", response_model=AttachmentDownload)
def get_note_attachment(
    customer_id: str,
    note_id: str,
    store: TableStore = Depends(get_store),
    object_store: ObjectStore = Depends(get_object_store),
):
    with track_operation("GetAttachment", customer_id=customer_id, note_id=note_id):
        download_url, filename = note_crud.attachment_url(
            store,
            object_store,
            customer_id=customer_id,
            note_id=note_id,
            verify=get_settings().verify_attachments,
        )
        return {"downloadUrl": download_url, "filename": filename, "expiresIn": object_store.expires_in}
