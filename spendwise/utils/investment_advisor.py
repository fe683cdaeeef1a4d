from __future__ import annotations

from dataclasses import dataclass, asdict, field, fields
from typing import Any, Dict, List

BUCKETS = ("emergency_fund", "sip_mutual_funds", "ppf", "fixed_deposits", "gold")

# Tier name -> percentage per bucket, in BUCKETS order
SMALL_TIER_LIMIT = 10_000
MODERATE_TIER_LIMIT = 50_000
ALLOCATION_TIERS = {
    "small": (50, 30, 20, 0, 0),
    "moderate": (30, 35, 20, 10, 5),
    "large": (25, 40, 15, 12, 8),
}

# Estimated annual return per bucket
ANNUAL_RETURNS = {
    "emergency_fund": 0.04,  # savings account
    "sip_mutual_funds": 0.12,
    "ppf": 0.071,
    "fixed_deposits": 0.065,
    "gold": 0.05,
}

PROJECTION_YEARS = (1, 3, 5, 10)

INVESTMENT_TIPS = {
    "small": [
        "💡 Start with Emergency Fund: Build 3 months of expenses before investing.",
        "📈 SIP is Best: Start with ₹500/month SIP in Nifty 50 or Sensex ETF for long-term growth.",
        "🏛️ PPF Safety: Invest in PPF for guaranteed 7.1% returns and tax benefits.",
    ],
    "moderate": [
        "🎯 Emergency First: Ensure 6 months expenses in savings before aggressive investing.",
        "📊 SIP Strategy: Allocate 35% to SIP mutual funds - best for 5+ year returns (12% avg).",
        "🏦 FD Security: 10% in FDs gives you liquid funds at 6-7% returns.",
        "✨ Gold Hedge: 5% in Gold ETF protects against inflation.",
    ],
    "large": [
        "🏦 Multi-Asset Diversification: Spread investments across 5 asset classes for risk management.",
        "📈 40% SIP Focus: Largest allocation to SIP mutual funds for wealth creation.",
        "💰 PPF + FD Balance: 15% PPF (tax-free) + 12% FD (safety) = stable returns.",
        "🪙 Gold Allocation: 8% in Gold ETF/Sovereign Gold Bonds for inflation protection.",
        "🎓 Review Quarterly: Rebalance portfolio every 3 months for optimal growth.",
    ],
}


@dataclass
class Allocation:
    amount: float = 0.0
    percentage: float = 0.0


@dataclass
class InvestmentBreakdown:
    emergency_fund: Allocation = field(default_factory=Allocation)
    sip_mutual_funds: Allocation = field(default_factory=Allocation)
    ppf: Allocation = field(default_factory=Allocation)
    fixed_deposits: Allocation = field(default_factory=Allocation)
    gold: Allocation = field(default_factory=Allocation)

    def allocations(self) -> Dict[str, Allocation]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @property
    def total_invested(self) -> float:
        return sum(allocation.amount for allocation in self.allocations().values())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def investment_tier(amount: float) -> str:
    if amount < SMALL_TIER_LIMIT:
        return "small"
    if amount < MODERATE_TIER_LIMIT:
        return "moderate"
    return "large"


def get_investment_suggestions(amount: float) -> InvestmentBreakdown:
    """Split ``amount`` across the five buckets using the tier it falls in."""
    if amount <= 0:
        return InvestmentBreakdown()

    percentages = ALLOCATION_TIERS[investment_tier(amount)]
    return InvestmentBreakdown(**{
        bucket: Allocation(amount=amount * percentage / 100, percentage=percentage)
        for bucket, percentage in zip(BUCKETS, percentages)
    })


def get_investment_tips(amount: float) -> List[str]:
    return list(INVESTMENT_TIPS[investment_tier(amount)])


def get_return_estimate(breakdown: InvestmentBreakdown) -> Dict[str, float]:
    """
    Project the invested total forward at the blended annual rate of the
    buckets, compounding yearly.
    """
    total_invested = breakdown.total_invested
    annual_return = sum(
        allocation.amount * ANNUAL_RETURNS[bucket]
        for bucket, allocation in breakdown.allocations().items()
    )
    blended_rate = annual_return / total_invested if total_invested > 0 else 0.0

    return {
        f"year{years}": total_invested * (1 + blended_rate) ** years
        for years in PROJECTION_YEARS
    }
