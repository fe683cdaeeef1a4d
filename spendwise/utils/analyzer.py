from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass, asdict, field
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from spendwise.models.expense import Expense
from spendwise.utils.currency import format_currency, round_half_up
from spendwise.utils.tax_calculator import calculate_taxes

TREND_WINDOW_DAYS = 7
SPIKE_MULTIPLIER = 2
BUDGET_WARNING_PERCENT = 80


@dataclass
class SpendingAnalysis:
    """Aggregated view of a set of expenses."""

    category_breakdown: Dict[str, float] = field(default_factory=dict)
    category_percentages: Dict[str, int] = field(default_factory=dict)
    total_spending: float = 0.0
    average_transaction: float = 0.0
    highest_category: str = ""
    highest_category_amount: float = 0.0
    spikes_detected: List[str] = field(default_factory=list)
    trends: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SpendingAnalyzer:
    """
    Aggregates expenses into the numbers shown on the dashboard and consumed
    by the suggestion rules. Everything relative to "today" goes through the
    injected clock.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or datetime.now

    def now(self) -> datetime:
        return self._clock()

    def analyze(self, expenses: Sequence[Expense]) -> SpendingAnalysis:
        if not expenses:
            return SpendingAnalysis()

        category_breakdown: Dict[str, float] = {}
        for exp in expenses:
            category_breakdown[exp.category] = category_breakdown.get(exp.category, 0.0) + exp.amount

        total_spending = sum(category_breakdown.values())
        average_transaction = total_spending / len(expenses)

        category_percentages = {
            category: round_half_up(amount / total_spending * 100) if total_spending else 0
            for category, amount in category_breakdown.items()
        }

        # Equal sums resolve to the lexically smallest label
        highest_category, highest_amount = min(
            category_breakdown.items(), key=lambda item: (-item[1], item[0])
        )

        spikes_detected = [
            f"{exp.category}: {format_currency(exp.amount, 0)}"
            for exp in expenses
            if exp.amount > average_transaction * SPIKE_MULTIPLIER
        ]

        trends: List[str] = []
        if self.recent_daily_average(expenses) > average_transaction:
            trends.append("increasing")

        return SpendingAnalysis(
            category_breakdown=category_breakdown,
            category_percentages=category_percentages,
            total_spending=total_spending,
            average_transaction=average_transaction,
            highest_category=highest_category,
            highest_category_amount=highest_amount,
            spikes_detected=spikes_detected,
            trends=trends,
        )

    def recent_daily_average(self, expenses: Sequence[Expense]) -> float:
        """Spend per day over the window ``[now - 7 days, now)``; empty days count as zero."""
        now = self.now()
        window_start = now - timedelta(days=TREND_WINDOW_DAYS)
        recent_total = sum(
            exp.amount
            for exp in expenses
            if window_start <= datetime.combine(exp.date, time.min) < now
        )
        return recent_total / TREND_WINDOW_DAYS

    def current_month(self, expenses: Sequence[Expense]) -> List[Expense]:
        today = self.now().date()
        return [
            exp for exp in expenses
            if exp.date.year == today.year and exp.date.month == today.month
        ]

    def category_totals(self, expenses: Sequence[Expense]) -> List[Dict[str, Any]]:
        """Current-month spend per category, largest first."""
        totals: Dict[str, float] = defaultdict(float)
        for exp in self.current_month(expenses):
            totals[exp.category] += exp.amount
        rows = [{"name": cat, "value": round(total, 2)} for cat, total in totals.items()]
        return sorted(rows, key=lambda row: row["value"], reverse=True)

    def monthly_totals(self, expenses: Sequence[Expense], limit: int = 12) -> List[Dict[str, Any]]:
        totals: Dict[str, float] = defaultdict(float)
        for exp in expenses:
            totals[exp.date.strftime("%Y-%m")] += exp.amount

        rows = []
        for month in sorted(totals):
            year, month_number = (int(part) for part in month.split("-"))
            label = f"{calendar.month_abbr[month_number]} {year % 100:02d}"
            rows.append({"month": month, "label": label, "total": round(totals[month], 2)})
        return rows[-limit:] if limit > 0 else []

    def weekly_totals(self, expenses: Sequence[Expense]) -> List[Dict[str, Any]]:
        today = self.now().date()
        days: Dict[date, float] = {
            today - timedelta(days=offset): 0.0 for offset in range(TREND_WINDOW_DAYS - 1, -1, -1)
        }
        for exp in expenses:
            if exp.date in days:
                days[exp.date] += exp.amount
        return [
            {"date": day.isoformat(), "day": calendar.day_abbr[day.weekday()], "total": round(total, 2)}
            for day, total in days.items()
        ]

    def month_overview(
        self,
        expenses: Sequence[Expense],
        monthly_budget: Optional[float] = None,
    ) -> Dict[str, Any]:
        this_month = self.current_month(expenses)
        total = sum(exp.amount for exp in this_month)

        category_breakdown: Dict[str, float] = {}
        for exp in this_month:
            category_breakdown[exp.category] = category_breakdown.get(exp.category, 0.0) + exp.amount

        return {
            "month": self.now().strftime("%Y-%m"),
            "total": round(total, 2),
            "average": round(total / len(this_month), 2) if this_month else 0.0,
            "count": len(this_month),
            "category_breakdown": {cat: round(amount, 2) for cat, amount in category_breakdown.items()},
            "tax_summary": calculate_taxes(category_breakdown, total).to_dict(),
            "budget": budget_progress(total, monthly_budget) if monthly_budget else None,
        }


def budget_progress(spent: float, monthly_budget: float) -> Dict[str, Any]:
    percentage = spent / monthly_budget * 100
    if percentage > 100:
        status = "over"
        message = f"Over budget by {format_currency(spent - monthly_budget)}"
    else:
        status = "warning" if percentage > BUDGET_WARNING_PERCENT else "ok"
        message = f"{format_currency(monthly_budget - spent)} remaining"
    return {
        "budget": monthly_budget,
        "spent": round(spent, 2),
        "percentage": round(percentage, 2),
        "progress": round(min(percentage, 100.0), 2),
        "status": status,
        "message": message,
    }
