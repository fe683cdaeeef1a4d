import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from spendwise.db import repository
from spendwise.db.store import KeyValueStore, get_store
from spendwise.models.expense import Expense, ExpenseCreate, ExpenseUpdate
from spendwise.routers.auth import get_current_user_id

router = APIRouter()
logger = logging.getLogger(__name__)


def load_expenses(store: KeyValueStore, user_id: str) -> List[Expense]:
    """All of a user's expenses as models, in stored order."""
    return [Expense(**item) for item in repository.list_expenses(store, user_id)]


@router.post("/", response_model=Expense, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: ExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
):
    expense_db = Expense(**expense.model_dump())
    success = repository.put_expense(store, user_id, expense_db.model_dump(mode="json"))
    if not success:
        logger.error(f"Failed to save expense for user {user_id}")
        raise HTTPException(status_code=500, detail="Failed to save expense")
    return expense_db


@router.get("/", response_model=List[Expense])
def list_expenses(user_id: str = Depends(get_current_user_id), store: KeyValueStore = Depends(get_store)):
    """Newest expense date first."""
    expenses = load_expenses(store, user_id)
    return sorted(expenses, key=lambda exp: exp.date, reverse=True)


@router.get("/{expense_id}", response_model=Expense)
def get_expense(
    expense_id: str,
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
):
    item = repository.get_expense(store, user_id, expense_id)
    if not item:
        raise HTTPException(status_code=404, detail="Expense not found")
    return Expense(**item)


@router.put("/{expense_id}", response_model=Expense)
def update_expense(
    expense_id: str,
    expense_update: ExpenseUpdate,
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
):
    mutable_fields = {
        k: v for k, v in expense_update.model_dump(mode="json", exclude_unset=True).items()
        if v is not None
    }
    if not mutable_fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = repository.update_expense(store, user_id, expense_id, mutable_fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Expense not found")

    return Expense(**updated)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: str,
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
):
    deleted = repository.delete_expense(store, user_id, expense_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Expense not found")
    return None
