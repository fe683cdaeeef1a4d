from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from spendwise.utils.analyzer import SpendingAnalysis
from spendwise.utils.currency import format_currency, round_half_up

logger = logging.getLogger(__name__)

START_TRACKING_MESSAGE = "💡 Start tracking your expenses to get personalized suggestions!"
BALANCED_MESSAGE = (
    "📈 Your spending looks balanced. Keep monitoring your categories. "
    "Consider investing 10% of surplus income for wealth growth."
)


@dataclass(frozen=True)
class CoachRules:
    """Thresholds and multipliers behind the suggestion rules. Shares are percents."""

    budget_alert_ratio: float = 0.8
    non_essential_share_limit: float = 30
    non_essential_savings_rate: float = 0.25
    dining_share_limit: float = 25
    dining_savings_rate: float = 0.4
    shopping_share_limit: float = 20
    entertainment_share_limit: float = 15
    entertainment_savings_rate: float = 0.3
    surplus_ratio: float = 0.7
    surplus_investment_rate: float = 0.5
    healthy_average_limit: float = 500
    healthy_non_essential_limit: float = 25
    healthy_investment_rate: float = 0.1
    max_suggestions: int = 3
    non_essential_categories: Tuple[str, ...] = ("Entertainment", "Dining Out", "Shopping", "Hobbies")
    essential_categories: Tuple[str, ...] = ("Groceries", "Transportation", "Utilities", "Healthcare")


class SuggestionGenerator:
    """
    Turns a SpendingAnalysis plus an optional monthly budget into at most
    ``max_suggestions`` advisory strings. Rules run in a fixed order and the
    first ones to fire win.
    """

    def __init__(
        self,
        rules: Optional[CoachRules] = None,
        rules_config_path: Optional[str | Path] = None,
    ) -> None:
        self.rules = self._load_rules(rules or CoachRules(), rules_config_path)

    @staticmethod
    def _load_rules(rules: CoachRules, path: Optional[str | Path]) -> CoachRules:
        if not path:
            return rules

        rules_file = Path(path)
        if not rules_file.exists():
            return rules

        with rules_file.open() as fp:
            overrides: Dict[str, Any] = json.load(fp)

        known = {f.name for f in fields(CoachRules)}
        unknown = set(overrides) - known
        if unknown:
            logger.warning(f"Ignoring unknown coach rule keys in {rules_file}: {sorted(unknown)}")
        cleaned = {}
        for key, value in overrides.items():
            if key not in known:
                continue
            cleaned[key] = tuple(value) if isinstance(value, list) else value
        logger.info(f"Loaded {len(cleaned)} coach rule override(s) from {rules_file}")
        return replace(rules, **cleaned)

    def generate(self, analysis: SpendingAnalysis, monthly_budget: Optional[float] = None) -> List[str]:
        if analysis.total_spending == 0:
            return [START_TRACKING_MESSAGE]

        rules = self.rules
        breakdown = analysis.category_breakdown
        percentages = analysis.category_percentages
        total = analysis.total_spending
        suggestions: List[str] = []

        if monthly_budget and total > monthly_budget * rules.budget_alert_ratio:
            percent_used = round_half_up(total / monthly_budget * 100)
            difference = total - monthly_budget
            position = (
                f"{format_currency(difference)} over" if difference > 0
                else f"{format_currency(-difference)} left"
            )
            suggestions.append(
                f"⚠️ Budget Alert: You've used {percent_used}% of your {format_currency(monthly_budget)} "
                f"budget ({position}). Solution: Reduce non-essential spending on "
                f"{analysis.highest_category} or defer discretionary purchases."
            )

        non_essential = sum(
            amount for cat, amount in breakdown.items() if cat in rules.non_essential_categories
        )
        non_essential_percent = round_half_up(non_essential / total * 100)
        if non_essential_percent > rules.non_essential_share_limit:
            savings = non_essential * rules.non_essential_savings_rate
            cut = round_half_up(rules.non_essential_savings_rate * 100)
            suggestions.append(
                f"💡 High Non-Essential Spending: {non_essential_percent}% goes to non-essentials. "
                f"Solution: Implement the {cut}% rule - cut back on {analysis.highest_category} by {cut}% "
                f"to save {format_currency(savings)} monthly."
            )

        if analysis.spikes_detected:
            suggestions.append(
                f"📊 Unusual Spike Detected: {analysis.spikes_detected[0]}. Solution: Review this "
                "transaction - was it necessary? Plan similar purchases in advance next time to "
                "negotiate better prices."
            )

        if percentages.get("Dining Out", 0) > rules.dining_share_limit:
            dining = breakdown["Dining Out"]
            suggestions.append(
                f"🍔 High Dining Out Expenses: {format_currency(dining)}/month. Solution: Prepare 70% "
                "of meals at home and dine out once weekly. Potential savings: "
                f"{format_currency(dining * rules.dining_savings_rate)}/month."
            )

        if percentages.get("Shopping", 0) > rules.shopping_share_limit:
            suggestions.append(
                f"🛍️ High Shopping Spending: {format_currency(breakdown['Shopping'])}/month. Solution: "
                "Implement a 48-hour rule - wait 2 days before non-essential purchases. "
                "Unsubscribe from promotional emails."
            )

        if percentages.get("Entertainment", 0) > rules.entertainment_share_limit:
            entertainment = breakdown["Entertainment"]
            suggestions.append(
                f"🎬 Entertainment Spending: {format_currency(entertainment)}/month. Solution: Choose "
                "free/low-cost activities. Save "
                f"{format_currency(entertainment * rules.entertainment_savings_rate)}/month by cutting "
                "non-essential subscriptions."
            )

        essential = sum(
            amount for cat, amount in breakdown.items() if cat in rules.essential_categories
        )
        if monthly_budget and total < monthly_budget * rules.surplus_ratio and essential > 0:
            surplus = monthly_budget - total
            suggestions.append(
                f"💰 Under Budget! You have {format_currency(surplus)} surplus. Investment Tip: Invest "
                f"{round_half_up(rules.surplus_investment_rate * 100)}% "
                f"({format_currency(surplus * rules.surplus_investment_rate)}) in: PPF (7.1% returns), "
                "Gold ETF, or Emergency Fund - build 6 months of expenses first!"
            )

        if (
            not suggestions
            and not monthly_budget
            and analysis.average_transaction < rules.healthy_average_limit
            and non_essential_percent < rules.healthy_non_essential_limit
        ):
            suggestions.append(
                "📈 Excellent Spending Discipline! Invest "
                f"{format_currency(total * rules.healthy_investment_rate)}/month "
                f"({round_half_up(rules.healthy_investment_rate * 100)}% of spending) in: "
                "SIP mutual funds (12% avg returns), Treasury bills, or cryptocurrency (5% allocation)."
            )

        if not suggestions:
            suggestions.append(BALANCED_MESSAGE)

        return suggestions[: rules.max_suggestions]
