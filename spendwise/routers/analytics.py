import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from spendwise.core.clock import Clock, get_clock
from spendwise.db import repository
from spendwise.db.store import KeyValueStore, get_store
from spendwise.models.analytics import TaxRequest
from spendwise.routers.auth import get_current_user_id
from spendwise.routers.expenses import load_expenses
from spendwise.utils.analyzer import SpendingAnalyzer
from spendwise.utils.tax_calculator import calculate_taxes

router = APIRouter()
logger = logging.getLogger(__name__)


def get_analyzer(clock: Clock = Depends(get_clock)) -> SpendingAnalyzer:
    return SpendingAnalyzer(clock=clock)


@router.get("/summary")
def spending_summary(
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
    analyzer: SpendingAnalyzer = Depends(get_analyzer),
) -> Dict:
    expenses = load_expenses(store, user_id)
    return analyzer.analyze(expenses).to_dict()


@router.get("/overview")
def month_overview(
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
    analyzer: SpendingAnalyzer = Depends(get_analyzer),
) -> Dict:
    """
    Current month totals, tax estimate and progress against the stored budget.
    """
    try:
        expenses = load_expenses(store, user_id)
        monthly_budget = repository.get_monthly_budget(store, user_id)
        return analyzer.month_overview(expenses, monthly_budget)
    except Exception as e:
        logger.error(f"Error building overview for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error analyzing expenses: {str(e)}")


@router.get("/categories")
def category_totals(
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
    analyzer: SpendingAnalyzer = Depends(get_analyzer),
) -> List[Dict]:
    return analyzer.category_totals(load_expenses(store, user_id))


@router.get("/monthly")
def monthly_totals(
    limit: int = Query(12, ge=1, le=120),
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
    analyzer: SpendingAnalyzer = Depends(get_analyzer),
) -> List[Dict]:
    return analyzer.monthly_totals(load_expenses(store, user_id), limit=limit)


@router.get("/weekly")
def weekly_totals(
    user_id: str = Depends(get_current_user_id),
    store: KeyValueStore = Depends(get_store),
    analyzer: SpendingAnalyzer = Depends(get_analyzer),
) -> List[Dict]:
    return analyzer.weekly_totals(load_expenses(store, user_id))


@router.post("/taxes")
def tax_estimate(request: TaxRequest, user_id: str = Depends(get_current_user_id)) -> Dict:
    total = request.total_amount
    if total is None:
        total = sum(request.category_breakdown.values())
    return calculate_taxes(request.category_breakdown, total).to_dict()
