"""Customer schemas for create and read operations."""

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

RequiredStr = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddressCreate(CamelModel):
    street: RequiredStr
    city: RequiredStr
    state: RequiredStr
    postal_code: RequiredStr
    country: RequiredStr


class AddressRead(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class CustomerCreate(CamelModel):
    """Schema for customer creation requests; every field is required."""

    first_name: RequiredStr
    last_name: RequiredStr
    job_title: RequiredStr
    company: RequiredStr
    email: EmailStr
    phone: RequiredStr
    address: AddressCreate


class CustomerRead(CamelModel):
    """Schema for customer responses."""

    id: str
    first_name: str
    last_name: str
    job_title: Optional[str] = None
    company: Optional[str] = None
    email: str
    phone: Optional[str] = None
    address: Optional[AddressRead] = None
    created: str
    updated: str
    type: Literal["CUSTOMER"] = "CUSTOMER"


class CustomerDeleted(CamelModel):
    status: Literal["deleted"] = "deleted"
    id: str
    deleted_notes: int = 0
