"""Key-value store contract over one table with a composite (pk, sk) key.

The contract mirrors what a DynamoDB single-table design needs and nothing
more: point get/put/delete, a field-level point update that returns the new
item, a range query over one partition restricted to a sort-key prefix, and a
query on the ``gsi1`` secondary index (``type`` partition, ``created`` sort).
Items are plain dicts that always carry their ``pk`` and ``sk``.
"""

from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import ResourceNotFoundError, StoreError
from backend.app.models.item import TableItem

KEY_FIELDS = ("pk", "sk")


class TableStore:
    def get_item(self, pk: str, sk: str) -> Optional[dict]:
        raise NotImplementedError

    def put_item(self, item: dict) -> None:
        raise NotImplementedError

    def delete_item(self, pk: str, sk: str) -> None:
        """Remove one item; removing a missing key is not an error."""
        raise NotImplementedError

    def update_item(self, pk: str, sk: str, changes: dict[str, Any]) -> dict:
        """Set the given attributes on an existing item and return the full new item."""
        raise NotImplementedError

    def query_partition(
        self,
        pk: str,
        sk_prefix: str = "",
        *,
        ascending: bool = True,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        """Items in partition ``pk`` whose sort key starts with ``sk_prefix``.

        ``filters`` are attribute equality checks applied after the key
        condition, the way a DynamoDB FilterExpression is.
        """
        raise NotImplementedError

    def query_index(self, type_value: str, *, ascending: bool = False) -> list[dict]:
        """Items whose ``type`` equals ``type_value``, ordered by ``created``."""
        raise NotImplementedError


def matches_filters(item: dict, filters: Optional[dict[str, Any]]) -> bool:
    if not filters:
        return True
    return all(item.get(name) == value for name, value in filters.items())


class SqlTableStore(TableStore):
    """The single table emulated in one SQLAlchemy table (``table_items``)."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _row_values(self, item: dict) -> dict:
        attributes = {k: v for k, v in item.items() if k not in KEY_FIELDS}
        return {
            "pk": item["pk"],
            "sk": item["sk"],
            "type": attributes.get("type"),
            "created": attributes.get("created"),
            "attributes": attributes,
        }

    def get_item(self, pk: str, sk: str) -> Optional[dict]:
        try:
            with self._session_factory() as db:
                row = db.get(TableItem, (pk, sk))
                return row.to_item() if row else None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read item {pk}/{sk}") from e

    def put_item(self, item: dict) -> None:
        values = self._row_values(item)
        try:
            with self._session_factory() as db:
                row = db.get(TableItem, (values["pk"], values["sk"]))
                if row is None:
                    db.add(TableItem(**values))
                else:
                    row.type = values["type"]
                    row.created = values["created"]
                    row.attributes = values["attributes"]
                db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to write item {item['pk']}/{item['sk']}") from e

    def delete_item(self, pk: str, sk: str) -> None:
        try:
            with self._session_factory() as db:
                row = db.get(TableItem, (pk, sk))
                if row is not None:
                    db.delete(row)
                    db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete item {pk}/{sk}") from e

    def update_item(self, pk: str, sk: str, changes: dict[str, Any]) -> dict:
        try:
            with self._session_factory() as db:
                row = db.get(TableItem, (pk, sk))
                if row is None:
                    raise ResourceNotFoundError("Item not found")
                attributes = dict(row.attributes or {})
                attributes.update({k: v for k, v in changes.items() if k not in KEY_FIELDS})
                # reassign so the JSON column is flagged dirty
                row.attributes = attributes
                row.type = attributes.get("type")
                row.created = attributes.get("created")
                db.commit()
                db.refresh(row)
                return row.to_item()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update item {pk}/{sk}") from e

    def query_partition(
        self,
        pk: str,
        sk_prefix: str = "",
        *,
        ascending: bool = True,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        order = TableItem.sk.asc() if ascending else TableItem.sk.desc()
        try:
            with self._session_factory() as db:
                query = db.query(TableItem).filter(TableItem.pk == pk)
                if sk_prefix:
                    query = query.filter(TableItem.sk.startswith(sk_prefix, autoescape=True))
                rows = query.order_by(order).all()
                items = [row.to_item() for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query partition {pk}") from e
        return [item for item in items if matches_filters(item, filters)]

    def query_index(self, type_value: str, *, ascending: bool = False) -> list[dict]:
        if ascending:
            order_by_clause = [TableItem.created.asc(), TableItem.pk.asc()]
        else:
            order_by_clause = [TableItem.created.desc(), TableItem.pk.desc()]
        try:
            with self._session_factory() as db:
                rows = (
                    db.query(TableItem)
                    .filter(TableItem.type == type_value)
                    .order_by(*order_by_clause)
                    .all()
                )
                return [row.to_item() for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query index for type {type_value}") from e
