"""
Budget Router
Stores the user's monthly budget ceiling used by analytics and the coach
"""
import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status

from spendwise.db import repository
from spendwise.db.store import KeyValueStore, get_store
from spendwise.models.budget import BudgetUpdate
from spendwise.routers.auth import get_current_user_id

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/")
def get_budget(user_id: str = Depends(get_current_user_id), store: KeyValueStore = Depends(get_store)) -> Dict:
    return {"monthly_budget": repository.get_monthly_budget(store, user_id)}


@router.put("/")
def update_budget(
    update: BudgetUpdate,
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
) -> Dict:
    if not repository.save_monthly_budget(store, user_id, update.monthly_budget):
        logger.error(f"Failed to save budget for user {user_id}")
        raise HTTPException(status_code=500, detail="Failed to save budget")
    logger.info(f"Monthly budget for user {user_id} set to {update.monthly_budget}")
    return {"monthly_budget": update.monthly_budget}


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def clear_budget(user_id: str = Depends(get_current_user_id), store: KeyValueStore = Depends(get_store)):
    repository.clear_monthly_budget(store, user_id)
    return None
