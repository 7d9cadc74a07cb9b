"""AWS DynamoDB implementation of the document store.

One table per collection, keyed by ``id``. Unique indexes are enforced with
sentinel items in a shared ``<prefix>-unique-keys`` table: every write that
sets an indexed value also puts a sentinel whose key encodes that value,
conditioned on ``attribute_not_exists(id)``, inside the same
``TransactWriteItems`` call as the document itself.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from decimal import Decimal
import json
import logging
from typing import Any
import uuid

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from campreg.core.exceptions import StorageError, UniqueConstraintViolation
from campreg.ports.storage import DocumentStorePort, Filters
from campreg.storage.constraints import COLLECTIONS, UNIQUE_INDEXES, UniqueIndex

logger = logging.getLogger(__name__)

UNIQUE_KEYS_SUFFIX = "unique-keys"


def _serialize_value(value: Any) -> Any:
    """Convert Python types to DynamoDB-compatible types."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _deserialize_value(value: Any) -> Any:
    """Convert DynamoDB types back to Python types."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _deserialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_deserialize_value(item) for item in value]
    return value


class DynamoDBDocumentStore(DocumentStorePort):
    """DynamoDB-backed implementation of ``DocumentStorePort``."""

    def __init__(
        self,
        table_prefix: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        unique_indexes: dict[str, tuple[UniqueIndex, ...]] | None = None,
    ) -> None:
        self.table_prefix = table_prefix
        self.region = region

        # For local testing with DynamoDB Local
        if endpoint_url:
            self.dynamodb = boto3.resource(
                "dynamodb", region_name=region, endpoint_url=endpoint_url
            )
        else:
            self.dynamodb = boto3.resource("dynamodb", region_name=region)

        self._client = self.dynamodb.meta.client
        self._unique_indexes = (
            UNIQUE_INDEXES if unique_indexes is None else unique_indexes
        )

    # ------------------------------------------------------------------
    # Table helpers
    # ------------------------------------------------------------------

    def table_name(self, collection: str) -> str:
        return f"{self.table_prefix}-{collection}"

    @property
    def unique_keys_table_name(self) -> str:
        return f"{self.table_prefix}-{UNIQUE_KEYS_SUFFIX}"

    def ensure_tables(self) -> None:
        """Create any missing tables. Intended for development and tests."""
        existing = set(self._client.list_tables().get("TableNames", []))
        wanted = [self.table_name(c) for c in COLLECTIONS]
        wanted.append(self.unique_keys_table_name)

        for name in wanted:
            if name in existing:
                continue
            logger.info("Creating DynamoDB table %s", name)
            table = self.dynamodb.create_table(
                TableName=name,
                KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()

    def _sentinel_id(
        self, collection: str, index: UniqueIndex, key: tuple[Any, ...]
    ) -> str:
        return f"{collection}#{index.name}#{json.dumps(list(key), ensure_ascii=False)}"

    def _sentinel_put(
        self, collection: str, index: UniqueIndex, key: tuple[Any, ...], owner: str
    ) -> dict[str, Any]:
        return {
            "Put": {
                "TableName": self.unique_keys_table_name,
                "Item": {
                    "id": self._sentinel_id(collection, index, key),
                    "owner": owner,
                    "collection": collection,
                },
                "ConditionExpression": "attribute_not_exists(id)",
            }
        }

    def _sentinel_delete(
        self, collection: str, index: UniqueIndex, key: tuple[Any, ...]
    ) -> dict[str, Any]:
        return {
            "Delete": {
                "TableName": self.unique_keys_table_name,
                "Key": {"id": self._sentinel_id(collection, index, key)},
            }
        }

    async def _run(self, func: Any) -> Any:
        # boto3 is synchronous; keep the event loop free
        return await asyncio.get_event_loop().run_in_executor(None, func)

    async def _transact(
        self,
        collection: str,
        items: list[dict[str, Any]],
        guarded: list[tuple[int, UniqueIndex, tuple[Any, ...]]],
    ) -> bool:
        """Run a write transaction.

        Returns False when the document condition (item 0) failed. Raises
        ``UniqueConstraintViolation`` when a sentinel condition failed.
        """
        try:
            await self._run(lambda: self._client.transact_write_items(TransactItems=items))
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "TransactionCanceledException":
                logger.exception("DynamoDB transaction failed on %s", collection)
                raise StorageError(str(e)) from e

            reasons = e.response.get("CancellationReasons") or []
            failed = {
                position
                for position, reason in enumerate(reasons)
                if reason.get("Code") == "ConditionalCheckFailed"
            }
            for position, index, key in guarded:
                if position in failed:
                    raise UniqueConstraintViolation(collection, index.fields, key) from e
            if 0 in failed:
                return False

            # No usable cancellation reasons: find the sentinel that exists
            for _, index, key in guarded:
                if await self._sentinel_exists(collection, index, key):
                    raise UniqueConstraintViolation(collection, index.fields, key) from e
            logger.exception("DynamoDB transaction cancelled on %s", collection)
            raise StorageError(str(e)) from e
        return True

    async def _sentinel_exists(
        self, collection: str, index: UniqueIndex, key: tuple[Any, ...]
    ) -> bool:
        table = self.dynamodb.Table(self.unique_keys_table_name)
        sentinel_id = self._sentinel_id(collection, index, key)
        response = await self._run(lambda: table.get_item(Key={"id": sentinel_id}))
        return "Item" in response

    # ------------------------------------------------------------------
    # DocumentStorePort
    # ------------------------------------------------------------------

    async def insert(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(UTC).isoformat()
        stored = {**document}
        stored.setdefault("id", uuid.uuid4().hex)
        stored["created_at"] = now
        stored["updated_at"] = now

        items: list[dict[str, Any]] = [
            {
                "Put": {
                    "TableName": self.table_name(collection),
                    "Item": _serialize_value(stored),
                    "ConditionExpression": "attribute_not_exists(id)",
                }
            }
        ]
        guarded = []
        for index in self._unique_indexes.get(collection, ()):
            key = index.key_for(stored)
            if key is None:
                continue
            guarded.append((len(items), index, key))
            items.append(self._sentinel_put(collection, index, key, stored["id"]))

        if not await self._transact(collection, items, guarded):
            raise UniqueConstraintViolation(collection, ("id",), stored["id"])

        logger.info("Created document in %s: %s", collection, stored["id"])
        return stored

    async def find_by_id(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        table = self.dynamodb.Table(self.table_name(collection))
        try:
            response = await self._run(lambda: table.get_item(Key={"id": doc_id}))
        except ClientError as e:
            logger.exception("Failed to get %s from %s", doc_id, collection)
            raise StorageError(str(e)) from e

        if "Item" in response:
            return _deserialize_value(response["Item"])
        return None

    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        *,
        sort_by: str | None = None,
    ) -> list[dict[str, Any]]:
        table = self.dynamodb.Table(self.table_name(collection))
        scan_kwargs: dict[str, Any] = {}
        if filters:
            condition = None
            for field, value in filters.items():
                clause = Attr(field).eq(_serialize_value(value))
                condition = clause if condition is None else condition & clause
            scan_kwargs["FilterExpression"] = condition

        items: list[dict[str, Any]] = []
        try:
            while True:
                response = await self._run(lambda: table.scan(**scan_kwargs))
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.exception("Failed to scan %s", collection)
            raise StorageError(str(e)) from e

        documents = [_deserialize_value(item) for item in items]
        order_field = sort_by or "created_at"
        documents.sort(
            key=lambda d: (d.get(order_field) is None, str(d.get(order_field) or ""))
        )
        return documents

    async def find_one(
        self,
        collection: str,
        filters: Filters,
        *,
        sort_by: str | None = None,
    ) -> dict[str, Any] | None:
        documents = await self.find(collection, filters, sort_by=sort_by)
        return documents[0] if documents else None

    async def update_by_id(
        self, collection: str, doc_id: str, patch: dict[str, Any]
    ) -> dict[str, Any] | None:
        existing = await self.find_by_id(collection, doc_id)
        if existing is None:
            return None

        merged = {**existing, **patch}
        merged["id"] = doc_id
        merged["created_at"] = existing.get("created_at")
        merged["updated_at"] = datetime.now(UTC).isoformat()

        items: list[dict[str, Any]] = [
            {
                "Put": {
                    "TableName": self.table_name(collection),
                    "Item": _serialize_value(merged),
                    "ConditionExpression": "attribute_exists(id)",
                }
            }
        ]
        guarded = []
        for index in self._unique_indexes.get(collection, ()):
            old_key = index.key_for(existing)
            new_key = index.key_for(merged)
            if old_key == new_key:
                continue
            if new_key is not None:
                guarded.append((len(items), index, new_key))
                items.append(self._sentinel_put(collection, index, new_key, doc_id))
            if old_key is not None:
                items.append(self._sentinel_delete(collection, index, old_key))

        if not await self._transact(collection, items, guarded):
            return None

        logger.info("Updated document %s in %s", doc_id, collection)
        return merged

    async def delete_by_id(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        existing = await self.find_by_id(collection, doc_id)
        if existing is None:
            return None

        items: list[dict[str, Any]] = [
            {
                "Delete": {
                    "TableName": self.table_name(collection),
                    "Key": {"id": doc_id},
                    "ConditionExpression": "attribute_exists(id)",
                }
            }
        ]
        for index in self._unique_indexes.get(collection, ()):
            key = index.key_for(existing)
            if key is not None:
                items.append(self._sentinel_delete(collection, index, key))

        if not await self._transact(collection, items, []):
            return None

        logger.info("Deleted document %s from %s", doc_id, collection)
        return existing

    async def count(self, collection: str, filters: Filters | None = None) -> int:
        return len(await self.find(collection, filters))
