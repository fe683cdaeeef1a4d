from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict

# GST-style rates applied to tax-inclusive category totals
TAX_RATES: Dict[str, float] = {
    "Food": 0.05,
    "Groceries": 0.05,
    "Transportation": 0.05,
    "Shopping": 0.12,
    "Health & Fitness": 0.12,
    "Travel": 0.12,
    "Education": 0.0,
    "Utilities": 0.18,
    "Entertainment": 0.18,
    "Dining Out": 0.18,
    "Hobbies": 0.18,
    "Other": 0.18,
}
DEFAULT_TAX_RATE = 0.18


@dataclass
class TaxLine:
    amount: float  # pre-tax base
    tax_rate: float  # percent
    tax: float


@dataclass
class TaxSummary:
    breakdown: Dict[str, TaxLine] = field(default_factory=dict)
    total_tax: float = 0.0
    grand_total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def tax_rate_for(category: str) -> float:
    return TAX_RATES.get(category, DEFAULT_TAX_RATE)


def calculate_taxes(category_breakdown: Dict[str, float], total_amount: float) -> TaxSummary:
    """
    Split each tax-inclusive category total into its base and embedded tax.

    With rate ``r``: ``total = base * (1 + r)``, so ``base = total / (1 + r)``
    and ``tax = total - base``. ``grand_total`` is ``total_amount`` as given.
    """
    summary = TaxSummary(grand_total=total_amount)

    for category, total_including_tax in category_breakdown.items():
        rate = tax_rate_for(category)
        base_amount = total_including_tax / (1 + rate)
        tax = total_including_tax - base_amount

        summary.total_tax += tax
        summary.breakdown[category] = TaxLine(amount=base_amount, tax_rate=rate * 100, tax=tax)

    return summary
