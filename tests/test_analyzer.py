from datetime import date, datetime

import pytest

from spendwise.models.expense import Expense
from spendwise.utils.analyzer import SpendingAnalyzer, budget_progress

FIXED_NOW = datetime(2025, 11, 20, 12, 0, 0)

sample_expenses = [
    Expense(description="Groceries run", category="Groceries", amount=250.0, date=date(2025, 11, 1)),
    Expense(description="Electricity", category="Utilities", amount=1000.0, date=date(2025, 11, 2)),
    Expense(description="Vegetables", category="Groceries", amount=150.0, date=date(2025, 10, 3)),
    Expense(description="Headphones", category="Shopping", amount=1200.0, date=date(2025, 9, 4)),
]


def fixed_analyzer(now=FIXED_NOW):
    return SpendingAnalyzer(clock=lambda: now)


def test_empty_input_gives_zero_analysis():
    analysis = fixed_analyzer().analyze([])
    assert analysis.category_breakdown == {}
    assert analysis.category_percentages == {}
    assert analysis.total_spending == 0
    assert analysis.average_transaction == 0
    assert analysis.highest_category == ""
    assert analysis.highest_category_amount == 0
    assert analysis.spikes_detected == []
    assert analysis.trends == []


def test_breakdown_sums_to_total():
    analysis = fixed_analyzer().analyze(sample_expenses)
    assert analysis.category_breakdown == {"Groceries": 400.0, "Utilities": 1000.0, "Shopping": 1200.0}
    assert sum(analysis.category_breakdown.values()) == pytest.approx(analysis.total_spending)
    assert analysis.total_spending == 2600.0
    assert analysis.average_transaction == 650.0


def test_breakdown_keeps_first_appearance_order():
    analysis = fixed_analyzer().analyze(sample_expenses)
    assert list(analysis.category_breakdown) == ["Groceries", "Utilities", "Shopping"]


def test_percentages_round_half_up_and_sum_to_about_100():
    analysis = fixed_analyzer().analyze(sample_expenses)
    # 15.38 / 38.46 / 46.15
    assert analysis.category_percentages == {"Groceries": 15, "Utilities": 38, "Shopping": 46}
    assert abs(sum(analysis.category_percentages.values()) - 100) <= len(analysis.category_percentages)

    halves = [
        Expense(category="A", amount=1.0),
        Expense(category="B", amount=7.0),
    ]
    # 12.5 rounds up
    assert fixed_analyzer().analyze(halves).category_percentages == {"A": 13, "B": 88}


def test_highest_category():
    analysis = fixed_analyzer().analyze(sample_expenses)
    assert analysis.highest_category == "Shopping"
    assert analysis.highest_category_amount == 1200.0


def test_highest_category_tie_breaks_lexically():
    tied = [
        Expense(category="Travel", amount=300.0),
        Expense(category="Books", amount=300.0),
        Expense(category="Misc", amount=100.0),
    ]
    analysis = fixed_analyzer().analyze(tied)
    assert analysis.highest_category == "Books"
    assert analysis.highest_category_amount == 300.0


def test_detect_spikes():
    expenses = [
        Expense(category="A", amount=100, date=date(2025, 1, 1)),
        Expense(category="A", amount=100, date=date(2025, 1, 2)),
        Expense(category="B", amount=1000, date=date(2025, 1, 3)),
    ]
    analysis = fixed_analyzer().analyze(expenses)
    assert analysis.average_transaction == 400
    assert analysis.spikes_detected == ["B: ₹1000"]


def test_spike_requires_strictly_more_than_double():
    expenses = [
        Expense(category="A", amount=50),
        Expense(category="A", amount=50),
        Expense(category="B", amount=200),
    ]
    # average 100, 200 is not > 200
    assert fixed_analyzer().analyze(expenses).spikes_detected == []


def test_increasing_trend_in_last_seven_days():
    old = [Expense(category="Groceries", amount=10, date=date(2025, 6, 1)) for _ in range(10)]
    recent = [Expense(category="Shopping", amount=1000, date=date(2025, 11, 18))]

    analysis = fixed_analyzer().analyze(old + recent)
    # average 100, recent 1000 / 7 = 142.86
    assert analysis.average_transaction == 100
    assert analysis.trends == ["increasing"]


def test_trend_window_moves_with_the_clock():
    old = [Expense(category="Groceries", amount=10, date=date(2025, 6, 1)) for _ in range(10)]
    recent = [Expense(category="Shopping", amount=1000, date=date(2025, 11, 18))]

    later = fixed_analyzer(now=datetime(2025, 12, 20, 12, 0, 0)).analyze(old + recent)
    assert later.trends == []
    assert later.category_breakdown == fixed_analyzer().analyze(old + recent).category_breakdown


def test_trend_window_bounds():
    analyzer = fixed_analyzer()
    # window is [2025-11-13 12:00, 2025-11-20 12:00)
    assert analyzer.recent_daily_average([Expense(category="A", amount=70, date=date(2025, 11, 13))]) == 0
    assert analyzer.recent_daily_average([Expense(category="A", amount=70, date=date(2025, 11, 14))]) == 10
    assert analyzer.recent_daily_average([Expense(category="A", amount=70, date=date(2025, 11, 20))]) == 10
    assert analyzer.recent_daily_average([Expense(category="A", amount=70, date=date(2025, 11, 21))]) == 0


def test_no_trend_without_recent_expenses():
    analysis = fixed_analyzer().analyze(sample_expenses)
    assert analysis.trends == []


def test_monthly_totals():
    rows = fixed_analyzer().monthly_totals(sample_expenses)
    assert rows == [
        {"month": "2025-09", "label": "Sep 25", "total": 1200.0},
        {"month": "2025-10", "label": "Oct 25", "total": 150.0},
        {"month": "2025-11", "label": "Nov 25", "total": 1250.0},
    ]
    assert fixed_analyzer().monthly_totals(sample_expenses, limit=2)[0]["month"] == "2025-10"


def test_weekly_totals_cover_last_seven_days():
    expenses = [
        Expense(category="A", amount=20.5, date=date(2025, 11, 20)),
        Expense(category="A", amount=9.5, date=date(2025, 11, 20)),
        Expense(category="B", amount=40, date=date(2025, 11, 14)),
        Expense(category="B", amount=99, date=date(2025, 11, 13)),
    ]
    rows = fixed_analyzer().weekly_totals(expenses)
    assert len(rows) == 7
    assert rows[0] == {"date": "2025-11-14", "day": "Fri", "total": 40.0}
    assert rows[-1] == {"date": "2025-11-20", "day": "Thu", "total": 30.0}
    assert sum(row["total"] for row in rows) == 70.0


def test_category_totals_current_month_only():
    rows = fixed_analyzer().category_totals(sample_expenses)
    assert rows == [
        {"name": "Utilities", "value": 1000.0},
        {"name": "Groceries", "value": 250.0},
    ]


def test_month_overview_with_budget():
    overview = fixed_analyzer().month_overview(sample_expenses, monthly_budget=1500)
    assert overview["month"] == "2025-11"
    assert overview["total"] == 1250.0
    assert overview["count"] == 2
    assert overview["average"] == 625.0
    assert overview["category_breakdown"] == {"Groceries": 250.0, "Utilities": 1000.0}
    assert overview["tax_summary"]["grand_total"] == 1250.0
    assert overview["budget"]["status"] == "warning"
    assert overview["budget"]["message"] == "₹250.00 remaining"


def test_month_overview_without_budget_or_expenses():
    overview = fixed_analyzer().month_overview([])
    assert overview["total"] == 0
    assert overview["average"] == 0.0
    assert overview["budget"] is None
    assert overview["tax_summary"]["breakdown"] == {}


def test_budget_progress_over_budget():
    progress = budget_progress(1200, 1000)
    assert progress["status"] == "over"
    assert progress["percentage"] == 120.0
    assert progress["progress"] == 100.0
    assert progress["message"] == "Over budget by ₹200.00"
    assert budget_progress(500, 1000)["status"] == "ok"
