"""Note schemas for customer notes and their attachments."""

from typing import Literal, Optional

from pydantic import Field, StrictBool, field_validator, model_validator
from pydantic.alias_generators import to_camel

from backend.app.schemas.customer import CamelModel, RequiredStr
from backend.app.services.keyspace import clean_filename

EntityType = Literal["Contact", "Lead", "Opportunity", "Account"]

UPDATABLE_FIELDS = ("title", "content", "entity_type", "is_private", "attachment_key", "filename")


class NoteCreate(CamelModel):
    """Schema for creating a note. ``filename`` asks for an attachment upload URL."""

    title: RequiredStr
    content: RequiredStr
    entity_type: EntityType
    is_private: StrictBool
    filename: Optional[str] = Field(default=None, min_length=1)

    @field_validator("filename")
    @classmethod
    def last_path_component(cls, v):
        if v is None:
            return v
        return clean_filename(v)


class NoteUpdate(CamelModel):
    """Schema for partial note updates; every field is optional but typed when present."""

    title: Optional[RequiredStr] = None
    content: Optional[RequiredStr] = None
    entity_type: Optional[EntityType] = None
    is_private: Optional[StrictBool] = None
    attachment_key: Optional[RequiredStr] = None
    filename: Optional[str] = Field(default=None, min_length=1)

    @field_validator("filename")
    @classmethod
    def last_path_component(cls, v):
        if v is None:
            return v
        return clean_filename(v)

    @model_validator(mode="after")
    def attachment_fields_together(self):
        if (self.attachment_key is None) != (self.filename is None):
            raise ValueError("attachmentKey and filename must be supplied together")
        return self

    def changes(self) -> dict:
        """Supplied fields keyed by their stored (camelCase) attribute names."""
        return {
            to_camel(field): value
            for field in UPDATABLE_FIELDS
            if (value := getattr(self, field)) is not None
        }


class NoteRead(CamelModel):
    """Schema for note responses."""

    id: str
    customer_id: str
    title: str
    content: str
    entity_type: EntityType
    is_private: bool = False
    attachment_key: Optional[str] = None
    filename: Optional[str] = None
    created: str
    updated: str
    type: Literal["NOTE"] = "NOTE"


class NoteCreated(CamelModel):
    note: NoteRead
    upload_url: Optional[str] = None
    expires_in: Optional[int] = None


class NoteDeleted(CamelModel):
    status: Literal["deleted"] = "deleted"
    id: str


class AttachmentDownload(CamelModel):
    download_url: str
    filename: Optional[str] = None
    expires_in: int
