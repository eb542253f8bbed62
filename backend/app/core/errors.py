"""Typed failures raised by the CRM core; `error_handlers` maps them to responses."""


class CRMError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationError(CRMError):
    status_code = 400


class NothingToUpdateError(ValidationError):
    def __init__(self, message: str = "No fields to update"):
        super().__init__(message)


class ResourceNotFoundError(CRMError):
    status_code = 404


class InternalError(CRMError):
    """An unclassified failure; the cause is logged, never returned to the client."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class StoreError(CRMError):
    """The key-value store rejected or failed an operation."""


class ObjectStoreError(CRMError):
    """Signing a URL or checking an object in storage failed."""


class CascadeDeleteError(CRMError):
    """Some child notes could not be removed, so the customer item was kept."""

    def __init__(self, customer_id: str, failures: list[dict]):
        super().__init__(
            f"Customer {customer_id} not deleted: {len(failures)} note(s) could not be removed"
        )
        self.customer_id = customer_id
        self.failures = failures

    def to_body(self) -> dict:
        body = super().to_body()
        body["failures"] = self.failures
        return body

