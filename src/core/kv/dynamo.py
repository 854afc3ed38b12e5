"""DynamoDB-backed KVStore. One table per resource type, keyed by the full KV key."""

import base64
import json
import logging
from time import time
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from core.config import RESOURCE_TYPES, Config
from core.errors import StorageUnavailableError
from core.kv.interface import KeyEntry, KVStore, ListResult

logger = logging.getLogger(__name__)


def _encode_cursor(last_key: dict[str, Any]) -> str:
    return base64.urlsafe_b64encode(json.dumps(last_key).encode()).decode()


def _decode_cursor(cursor: str) -> dict[str, Any]:
    return json.loads(base64.urlsafe_b64decode(cursor.encode()))


class DynamoKVStore(KVStore):
    def __init__(self, dynamo_client: Any, table_name: str) -> None:
        self._client = dynamo_client
        self._table = table_name

    @property
    def table_name(self) -> str:
        return self._table

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        try:
            return getattr(self._client, operation)(TableName=self._table, **kwargs)
        except (ClientError, BotoCoreError) as e:
            raise StorageUnavailableError(f"DynamoDB {operation} on {self._table} failed: {e}") from e

    def get(self, key: str) -> str | None:
        response = self._call("get_item", Key={"pk": {"S": key}}, ConsistentRead=True)
        item = response.get("Item")
        if not item:
            return None
        ttl = item.get("ttl")
        # DynamoDB TTL deletion lags expiry; hide items that are already past it.
        if ttl and int(ttl["N"]) <= int(time()):
            return None
        return item["value"]["S"]

    def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        item: dict[str, Any] = {"pk": {"S": key}, "value": {"S": value}}
        if ttl_seconds:
            item["ttl"] = {"N": str(int(time()) + ttl_seconds)}
        self._call("put_item", Item=item)

    def delete(self, key: str) -> None:
        """delete_item is idempotent; no error for missing items."""
        self._call("delete_item", Key={"pk": {"S": key}})

    def list(self, prefix: str, cursor: str | None = None, limit: int | None = None) -> ListResult:
        scan_kwargs: dict[str, Any] = {
            "FilterExpression": "begins_with(pk, :prefix)",
            "ExpressionAttributeValues": {":prefix": {"S": prefix}},
            "ProjectionExpression": "pk",
        }
        if limit:
            scan_kwargs["Limit"] = limit
        if cursor:
            scan_kwargs["ExclusiveStartKey"] = _decode_cursor(cursor)

        response = self._call("scan", **scan_kwargs)

        last_key = response.get("LastEvaluatedKey")
        return ListResult(
            keys=[KeyEntry(name=item["pk"]["S"]) for item in response.get("Items", [])],
            complete=not last_key,
            cursor=_encode_cursor(last_key) if last_key else None,
        )


def build_kv_bindings(config: Config, dynamo_client: Any) -> dict[str, KVStore | None]:
    """Bind each resource type to its table; unconfigured tables stay unbound."""
    bindings: dict[str, KVStore | None] = {}
    for resource_type in RESOURCE_TYPES:
        table = config.table_for(resource_type)
        if table is None:
            logger.info("No table configured for %s; binding absent", resource_type)
        bindings[resource_type] = DynamoKVStore(dynamo_client, table) if table else None
    return bindings
