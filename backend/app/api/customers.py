"""Customer directory endpoints."""

from fastapi import APIRouter, Depends

from backend.app.core.errors import ResourceNotFoundError
from backend.app.core.metrics import track_operation
from backend.app.crud.crud_customer import customer_crud
from backend.app.db.store import TableStore
from backend.app.dependencies.store import get_store
from backend.app.schemas.customer import CustomerCreate, CustomerDeleted, CustomerRead

router = APIRouter(prefix="/v1/customers", tags=["customers"])


@router.post("", response_model=CustomerRead, status_code=201)
def create_customer(customer_in: CustomerCreate, store: TableStore = Depends(get_store)):
    with track_operation("CreateCustomer"):
        return customer_crud.create(store, obj_in=customer_in)


@router.get("", response_model=list[CustomerRead])
def list_customers(store: TableStore = Depends(get_store)):
    with track_operation("GetAllCustomers"):
        return customer_crud.get_multi(store)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: str, store: TableStore = Depends(get_store)):
    with track_operation("GetCustomer", customer_id=customer_id):
        customer = customer_crud.get(store, customer_id=customer_id)
        if customer is None:
            raise ResourceNotFoundError("Customer not found")
        return customer


@router.delete("/{customer_id}", response_model=CustomerDeleted)
def delete_customer(customer_id: str, store: TableStore = Depends(get_store)):
    with track_operation("DeleteCustomer", customer_id=customer_id):
        deleted_notes = customer_crud.delete(store, customer_id=customer_id)
        return {"status": "deleted", "id": customer_id, "deletedNotes": deleted_notes}
