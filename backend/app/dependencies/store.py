"""Dependencies that hand routers their table store and object store."""

from backend.app.core.settings import get_settings
from backend.app.db.store import TableStore
from backend.app.services.object_store import ObjectStore, object_store_from_settings

_store_instance = None
_object_store_instance = None


def build_store(settings) -> TableStore:
    if settings.store_backend == "dynamodb":
        from backend.app.db.dynamo import DynamoTableStore

        return DynamoTableStore.from_settings(settings)
    if settings.store_backend != "sql":
        raise ValueError(f"Unknown store backend: {settings.store_backend}")

    from backend.app.db.session import SessionLocal
    from backend.app.db.store import SqlTableStore

    return SqlTableStore(SessionLocal)


def get_store() -> TableStore:
    """Return the process-wide table store for the configured backend."""
    global _store_instance
    if _store_instance is None:
        _store_instance = build_store(get_settings())
    return _store_instance


def get_object_store() -> ObjectStore:
    global _object_store_instance
    if _object_store_instance is None:
        _object_store_instance = object_store_from_settings(get_settings())
    return _object_store_instance
