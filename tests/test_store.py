from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from spendwise.db import repository
from spendwise.db.store import DynamoStore, MemoryStore, build_store


def client_error(operation="GetItem", code="500"):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


def test_memory_store_get_set_clear():
    store = MemoryStore()
    assert store.get("missing") is None
    assert store.get("missing", default=[]) == []

    assert store.set("budget:u1", 5000.0)
    assert store.get("budget:u1") == 5000.0
    assert store.clear("budget:u1")
    assert not store.clear("budget:u1")
    assert store.get("budget:u1") is None
    assert store.ping()


def test_memory_store_returns_copies():
    store = MemoryStore()
    items = [{"id": "a"}]
    store.set("expenses:u1", items)
    items.append({"id": "b"})
    store.get("expenses:u1").append({"id": "c"})
    assert store.get("expenses:u1") == [{"id": "a"}]


def test_dynamo_store_converts_floats():
    table = MagicMock()
    store = DynamoStore(table=table)

    assert store.set("budget:u1", {"amount": 12.5, "count": 2})
    table.put_item.assert_called_once_with(
        Item={"pk": "budget:u1", "value": {"amount": Decimal("12.5"), "count": 2}}
    )

    table.get_item.return_value = {"Item": {"pk": "budget:u1", "value": {"amount": Decimal("12.5"), "count": Decimal("2")}}}
    assert store.get("budget:u1") == {"amount": 12.5, "count": 2}


def test_dynamo_store_missing_item_returns_default():
    table = MagicMock()
    table.get_item.return_value = {}
    assert DynamoStore(table=table).get("users:nobody", default="x") == "x"


def test_dynamo_store_client_errors_are_logged_not_raised():
    table = MagicMock()
    table.get_item.side_effect = client_error("GetItem")
    table.put_item.side_effect = client_error("PutItem")
    table.delete_item.side_effect = client_error("DeleteItem")
    table.scan.side_effect = client_error("Scan")
    store = DynamoStore(table=table)

    assert store.get("k", default=[]) == []
    assert store.set("k", 1) is False
    assert store.clear("k") is False
    assert store.ping() is False


def test_dynamo_store_clear_reports_whether_item_existed():
    table = MagicMock()
    table.delete_item.return_value = {"Attributes": {"pk": "k"}}
    store = DynamoStore(table=table)
    assert store.clear("k") is True

    table.delete_item.return_value = {}
    assert store.clear("k") is False


def test_build_store_rejects_unknown_backend():
    assert isinstance(build_store("memory"), MemoryStore)
    with pytest.raises(ValueError):
        build_store("sqlite")


def test_repository_expense_lifecycle():
    store = MemoryStore()
    first = {"id": "e1", "description": "Tea", "amount": 20.0, "category": "Food", "date": "2025-11-01"}
    second = {"id": "e2", "description": "Bus", "amount": 15.0, "category": "Transportation", "date": "2025-11-02"}

    assert repository.put_expense(store, "u1", first)
    assert repository.put_expense(store, "u1", second)
    assert [item["id"] for item in repository.list_expenses(store, "u1")] == ["e2", "e1"]
    assert repository.list_expenses(store, "u2") == []

    updated = repository.update_expense(store, "u1", "e1", {"amount": 25.0})
    assert updated["amount"] == 25.0
    assert repository.get_expense(store, "u1", "e1")["amount"] == 25.0
    assert repository.update_expense(store, "u1", "nope", {"amount": 1.0}) is None
    assert repository.update_expense(store, "u1", "e1", {}) is None

    assert repository.delete_expense(store, "u1", "e1")
    assert not repository.delete_expense(store, "u1", "e1")
    assert repository.get_expense(store, "u1", "e1") is None


def test_repository_sessions_and_budget():
    store = MemoryStore()
    session_id = repository.create_session(store, "u1", "asha")
    assert repository.get_session(store, session_id)["user_id"] == "u1"
    assert repository.delete_session(store, session_id)
    assert repository.get_session(store, session_id) is None

    assert repository.get_monthly_budget(store, "u1") is None
    assert repository.save_monthly_budget(store, "u1", 25000)
    assert repository.get_monthly_budget(store, "u1") == 25000.0
    assert repository.clear_monthly_budget(store, "u1")
    assert repository.get_monthly_budget(store, "u1") is None


def test_concurrent_expense_writes_are_not_lost():
    store = MemoryStore()

    def add(n):
        return repository.put_expense(store, "u1", {"id": f"e{n}", "amount": 1.0})

    with ThreadPoolExecutor(max_workers=16) as pool:
        assert all(pool.map(add, range(400)))

    stored = repository.list_expenses(store, "u1")
    assert len(stored) == 400
    assert len({item["id"] for item in stored}) == 400


def test_dynamo_update_first_write_is_conditional():
    table = MagicMock()
    table.get_item.return_value = {}
    assert DynamoStore(table=table).update("budget:u1", lambda value: 12.5)

    kwargs = table.put_item.call_args.kwargs
    assert kwargs["Item"] == {"pk": "budget:u1", "value": Decimal("12.5"), "version": 1}
    assert "ConditionExpression" in kwargs


def test_dynamo_update_retries_after_losing_a_race():
    table = MagicMock()
    table.get_item.side_effect = [
        {"Item": {"pk": "expenses:u1", "value": [], "version": Decimal("1")}},
        {"Item": {"pk": "expenses:u1", "value": [{"id": "x"}], "version": Decimal("2")}},
    ]
    table.put_item.side_effect = [client_error("PutItem", "ConditionalCheckFailedException"), {}]
    store = DynamoStore(table=table)

    assert repository.put_expense(store, "u1", {"id": "e1", "amount": 1.5})
    assert table.put_item.call_count == 2
    assert table.put_item.call_args.kwargs["Item"] == {
        "pk": "expenses:u1",
        "value": [{"id": "e1", "amount": Decimal("1.5")}, {"id": "x"}],
        "version": 3,
    }


def test_dynamo_update_gives_up_on_other_errors():
    table = MagicMock()
    table.get_item.return_value = {"Item": {"pk": "k", "value": [], "version": Decimal("4")}}
    table.put_item.side_effect = client_error("PutItem")
    assert DynamoStore(table=table).update("k", lambda items: items + [1]) is False
    assert table.put_item.call_count == 1


def test_dynamo_update_skips_write_when_nothing_changes():
    table = MagicMock()
    table.get_item.return_value = {"Item": {"pk": "expenses:u1", "value": [{"id": "a"}]}}
    store = DynamoStore(table=table)
    assert not repository.delete_expense(store, "u1", "missing")
    table.put_item.assert_not_called()
