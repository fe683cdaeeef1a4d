"""
Record-level helpers on top of a KeyValueStore.

Keys:
    users:<name>          -> user record
    sessions:<session_id> -> login session
    expenses:<user_id>    -> list of expense records, newest first
    budget:<user_id>      -> monthly budget (float)

Expense writes go through ``KeyValueStore.update`` so concurrent requests
from one user never drop each other's changes.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from spendwise.db.store import KeyValueStore

logger = logging.getLogger(__name__)


def _user_key(name: str) -> str:
    return f"users:{name}"


def _session_key(session_id: str) -> str:
    return f"sessions:{session_id}"


def _expenses_key(user_id: str) -> str:
    return f"expenses:{user_id}"


def _budget_key(user_id: str) -> str:
    return f"budget:{user_id}"


# Users

def get_user_by_name(store: KeyValueStore, name: str) -> Optional[Dict[str, Any]]:
    return store.get(_user_key(name))


def put_user(store: KeyValueStore, user_item: Dict[str, Any]) -> bool:
    return store.set(_user_key(user_item["name"]), user_item)


# Sessions

def create_session(store: KeyValueStore, user_id: str, name: str) -> Optional[str]:
    session_id = uuid4().hex
    record = {
        "session_id": session_id,
        "user_id": user_id,
        "name": name,
        "login_time": datetime.now(timezone.utc).isoformat(),
    }
    if not store.set(_session_key(session_id), record):
        return None
    return session_id


def get_session(store: KeyValueStore, session_id: str) -> Optional[Dict[str, Any]]:
    return store.get(_session_key(session_id))


def delete_session(store: KeyValueStore, session_id: str) -> bool:
    return store.clear(_session_key(session_id))


# Expenses

def list_expenses(store: KeyValueStore, user_id: str) -> List[Dict[str, Any]]:
    return store.get(_expenses_key(user_id), default=[]) or []


def get_expense(store: KeyValueStore, user_id: str, expense_id: str) -> Optional[Dict[str, Any]]:
    for item in list_expenses(store, user_id):
        if item["id"] == expense_id:
            return item
    return None


def put_expense(store: KeyValueStore, user_id: str, expense_item: Dict[str, Any]) -> bool:
    def prepend(items):
        return [expense_item] + (items or [])

    return store.update(_expenses_key(user_id), prepend, default=[])


def update_expense(
    store: KeyValueStore,
    user_id: str,
    expense_id: str,
    updates: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Apply partial updates to an expense. Returns the updated item or None.
    """
    if not updates:
        return None

    updated: Dict[str, Any] = {}

    def apply(items):
        updated.clear()
        for item in items or []:
            if item["id"] == expense_id:
                item.update(updates)
                updated.update(item)
                return items
        return None

    if not store.update(_expenses_key(user_id), apply, default=[]):
        if updated:
            logger.error(f"update_expense failed to persist {expense_id} for user {user_id}")
        return None
    return updated


def delete_expense(store: KeyValueStore, user_id: str, expense_id: str) -> bool:
    def remove(items):
        items = items or []
        remaining = [item for item in items if item["id"] != expense_id]
        return remaining if len(remaining) != len(items) else None

    return store.update(_expenses_key(user_id), remove, default=[])


# Budget

def get_monthly_budget(store: KeyValueStore, user_id: str) -> Optional[float]:
    value = store.get(_budget_key(user_id))
    return float(value) if value is not None else None


def save_monthly_budget(store: KeyValueStore, user_id: str, amount: float) -> bool:
    return store.set(_budget_key(user_id), float(amount))


def clear_monthly_budget(store: KeyValueStore, user_id: str) -> bool:
    return store.clear(_budget_key(user_id))
