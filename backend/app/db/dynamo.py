"""DynamoDB implementation of the table store (boto3 ``Table`` resource)."""

from functools import reduce
from typing import Any, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from backend.app.core.errors import ResourceNotFoundError, StoreError
from backend.app.db.store import KEY_FIELDS, TableStore


class DynamoTableStore(TableStore):
    def __init__(self, table, index_name: str = "gsi1"):
        self._table = table
        self._index_name = index_name

    @classmethod
    def from_settings(cls, settings) -> "DynamoTableStore":
        resource = boto3.resource(
            "dynamodb",
            region_name=settings.aws_region or None,
            endpoint_url=settings.dynamodb_endpoint,
            config=Config(retries={"max_attempts": 1, "mode": "standard"}),
        )
        return cls(resource.Table(settings.table_name), index_name=settings.index_name)

    def get_item(self, pk: str, sk: str) -> Optional[dict]:
        try:
            response = self._table.get_item(Key={"pk": pk, "sk": sk})
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"Failed to read item {pk}/{sk}") from e
        return response.get("Item")

    def put_item(self, item: dict) -> None:
        try:
            self._table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"Failed to write item {item['pk']}/{item['sk']}") from e

    def delete_item(self, pk: str, sk: str) -> None:
        try:
            self._table.delete_item(Key={"pk": pk, "sk": sk})
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"Failed to delete item {pk}/{sk}") from e

    def update_item(self, pk: str, sk: str, changes: dict[str, Any]) -> dict:
        fields = [name for name in changes if name not in KEY_FIELDS]
        # attribute names go through placeholders since "type" and friends are reserved words
        expression = "SET " + ", ".join(f"#f{i} = :v{i}" for i in range(len(fields)))
        try:
            response = self._table.update_item(
                Key={"pk": pk, "sk": sk},
                UpdateExpression=expression,
                ConditionExpression="attribute_exists(pk)",
                ExpressionAttributeNames={f"#f{i}": name for i, name in enumerate(fields)},
                ExpressionAttributeValues={f":v{i}": changes[name] for i, name in enumerate(fields)},
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise ResourceNotFoundError("Item not found") from e
            raise StoreError(f"Failed to update item {pk}/{sk}") from e
        except BotoCoreError as e:
            raise StoreError(f"Failed to update item {pk}/{sk}") from e
        return response["Attributes"]

    def _query_all(self, params: dict[str, Any]) -> list[dict]:
        out: list[dict] = []
        while True:
            response = self._table.query(**params)
            out.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key
        return out

    def query_partition(
        self,
        pk: str,
        sk_prefix: str = "",
        *,
        ascending: bool = True,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        condition = Key("pk").eq(pk)
        if sk_prefix:
            condition = condition & Key("sk").begins_with(sk_prefix)
        params: dict[str, Any] = {
            "KeyConditionExpression": condition,
            "ScanIndexForward": ascending,
        }
        if filters:
            params["FilterExpression"] = reduce(
                lambda acc, cond: acc & cond,
                [Attr(name).eq(value) for name, value in filters.items()],
            )
        try:
            return self._query_all(params)
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"Failed to query partition {pk}") from e

    def query_index(self, type_value: str, *, ascending: bool = False) -> list[dict]:
        params: dict[str, Any] = {
            "IndexName": self._index_name,
            "KeyConditionExpression": Key("type").eq(type_value),
            "ScanIndexForward": ascending,
        }
        try:
            return self._query_all(params)
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"Failed to query index for type {type_value}") from e
