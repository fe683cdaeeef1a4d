from typing import Dict

from fastapi import APIRouter

from spendwise.models.investment import InvestmentRequest
from spendwise.utils.investment_advisor import (
    get_investment_suggestions,
    get_investment_tips,
    get_return_estimate,
    investment_tier,
)

router = APIRouter()


@router.post("/plan")
def investment_plan(request: InvestmentRequest) -> Dict:
    """Allocation, tips and projected value for a lump sum."""
    breakdown = get_investment_suggestions(request.amount)
    return {
        "amount": request.amount,
        "tier": investment_tier(request.amount),
        "breakdown": breakdown.to_dict(),
        "tips": get_investment_tips(request.amount),
        "returns": get_return_estimate(breakdown),
    }
