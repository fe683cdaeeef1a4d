"""
Key-value persistence used by the repository helpers.

Two backends share the same get/set/update/clear surface: an in-process
``MemoryStore`` and a DynamoDB-backed ``DynamoStore``.
"""
import copy
import logging
import threading
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from spendwise.core.config import settings

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Interface every storage backend implements."""

    name = "base"

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> bool:
        raise NotImplementedError

    def clear(self, key: str) -> bool:
        raise NotImplementedError

    def update(self, key: str, mutate: Callable[[Any], Any], default: Any = None) -> bool:
        """
        Atomically replace the value under ``key`` with ``mutate(current)``.
        ``mutate`` returning None leaves the value untouched and gives False.
        """
        raise NotImplementedError

    def ping(self) -> bool:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    name = "memory"

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            # Callers mutate what they read; hand out copies
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> bool:
        with self._lock:
            self._data[key] = copy.deepcopy(value)
        return True

    def clear(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def update(self, key: str, mutate: Callable[[Any], Any], default: Any = None) -> bool:
        with self._lock:
            value = mutate(self.get(key, default))
            if value is None:
                return False
            return self.set(key, value)

    def ping(self) -> bool:
        return True


class DynamoStore(KeyValueStore):
    """
    Stores every value in a single DynamoDB table under the partition key ``pk``.
    The value lives in the ``value`` attribute with floats converted to Decimal.
    ``update`` writes conditionally on a ``version`` attribute and retries on conflict.
    """

    name = "dynamo"
    max_update_attempts = 5

    def __init__(self, table=None, table_name: Optional[str] = None, region: Optional[str] = None) -> None:
        self.table_name = table_name or settings.DYNAMO_TABLE
        if table is None:
            dynamodb = boto3.resource("dynamodb", region_name=region or settings.DYNAMO_REGION)
            table = dynamodb.Table(self.table_name)
        self.table = table

    def get(self, key: str, default: Any = None) -> Any:
        try:
            response = self.table.get_item(Key={"pk": key})
            item = response.get("Item")
            if not item or "value" not in item:
                return default
            return _from_dynamo(item["value"])
        except ClientError as e:
            logger.error(f"get {key} failed: {e.response['Error']['Message']}")
            return default

    def set(self, key: str, value: Any) -> bool:
        try:
            self.table.put_item(Item={"pk": key, "value": _convert_for_dynamo(value)})
            return True
        except ClientError as e:
            logger.error(f"set {key} failed: {e.response['Error']['Message']}")
            return False

    def clear(self, key: str) -> bool:
        try:
            response = self.table.delete_item(Key={"pk": key}, ReturnValues="ALL_OLD")
            return "Attributes" in response
        except ClientError as e:
            logger.error(f"clear {key} failed: {e.response['Error']['Message']}")
            return False

    def update(self, key: str, mutate: Callable[[Any], Any], default: Any = None) -> bool:
        for attempt in range(1, self.max_update_attempts + 1):
            try:
                item = self.table.get_item(Key={"pk": key}, ConsistentRead=True).get("Item") or {}
                current = _from_dynamo(item["value"]) if "value" in item else default
                value = mutate(current)
                if value is None:
                    return False

                version = item.get("version")
                if version is None:
                    condition = Attr("version").not_exists()
                    next_version = 1
                else:
                    condition = Attr("version").eq(version)
                    next_version = int(version) + 1

                self.table.put_item(
                    Item={"pk": key, "value": _convert_for_dynamo(value), "version": next_version},
                    ConditionExpression=condition,
                )
                return True
            except ClientError as e:
                if e.response["Error"]["Code"] != "ConditionalCheckFailedException":
                    logger.error(f"update {key} failed: {e.response['Error']['Message']}")
                    return False
                logger.warning(f"update {key} lost a write race (attempt {attempt}), retrying")

        logger.error(f"update {key} gave up after {self.max_update_attempts} attempts")
        return False

    def ping(self) -> bool:
        try:
            self.table.scan(Limit=1)
            return True
        except ClientError as e:
            logger.error(f"DynamoDB check failed: {e.response['Error']['Message']}")
            return False


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj


def build_store(backend: Optional[str] = None) -> KeyValueStore:
    backend = (backend or settings.STORAGE_BACKEND).lower()
    if backend == "dynamo":
        logger.info(f"Using DynamoDB store: table={settings.DYNAMO_TABLE}, region={settings.DYNAMO_REGION}")
        return DynamoStore()
    if backend == "memory":
        logger.info("Using in-memory store")
        return MemoryStore()
    raise ValueError(f"Unknown storage backend: {backend}")


_store: Optional[KeyValueStore] = None


def get_store() -> KeyValueStore:
    """FastAPI dependency returning the process-wide store."""
    global _store
    if _store is None:
        _store = build_store()
    return _store
