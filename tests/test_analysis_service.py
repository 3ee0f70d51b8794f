from datetime import date
from types import SimpleNamespace

import pytest

from models.budget import BudgetPeriod
from models.report import DateRange
from models.transaction import TransactionType
from services.analysis_service import AnalysisService, add_months, effective_end_date, percentage_used


def budget(id=1, category_id=1, amount=10000, period=BudgetPeriod.MONTHLY, start=date(2024, 1, 1), end=None):
    return SimpleNamespace(id=id, category_id=category_id, amount=amount, period=period,
                           start_date=start, end_date=end)


def expense(amount, category_id=1, on=date(2024, 1, 10), type=TransactionType.EXPENSE):
    return SimpleNamespace(amount=amount, category_id=category_id, date=on, type=type)


@pytest.mark.parametrize("start, months, expected", [
    (date(2024, 1, 15), 1, date(2024, 2, 15)),
    (date(2024, 1, 31), 1, date(2024, 2, 29)),
    (date(2023, 1, 31), 1, date(2023, 2, 28)),
    (date(2024, 3, 31), 1, date(2024, 4, 30)),
    (date(2024, 12, 31), 1, date(2025, 1, 31)),
    (date(2024, 2, 29), 12, date(2025, 2, 28)),
])
def test_add_months_clamps_to_month_end(start, months, expected):
    assert add_months(start, months) == expected


def test_effective_end_date():
    start = date(2024, 1, 1)
    assert effective_end_date(start, BudgetPeriod.WEEKLY) == date(2024, 1, 8)
    assert effective_end_date(start, BudgetPeriod.MONTHLY) == date(2024, 2, 1)
    assert effective_end_date(start, BudgetPeriod.YEARLY) == date(2025, 1, 1)
    assert effective_end_date(start, BudgetPeriod.YEARLY, date(2024, 3, 1)) == date(2024, 3, 1)


@pytest.mark.parametrize("spent, limit, expected", [
    (0, 10000, 0),
    (25000, 50000, 50),
    (35000, 20000, 175),
    (1, 200, 1),  # 0.5% arrondi vers le haut
    (1, 300, 0),
    (2, 3, 67),
    (500, 0, 0),
])
def test_percentage_used(spent, limit, expected):
    assert percentage_used(spent, limit) == expected


def test_budget_status_sums_only_matching_expenses():
    service = AnalysisService()
    expenses = [
        expense(1000),
        expense(2000, on=date(2024, 2, 1)),  # dernier jour de la fin déduite
        expense(4000, on=date(2024, 2, 2)),
        expense(8000, category_id=2),
        expense(16000, type=TransactionType.INCOME),
    ]
    [status] = service.budget_status([budget()], {1: "Food", 2: "Rent"}, expenses)
    assert status.spent_amount == 3000
    assert status.effective_end_date == date(2024, 2, 1)
    assert status.remaining_amount == 7000
    assert status.percentage_used == 30
    assert status.is_over_budget is False


def test_budget_status_skips_unknown_categories():
    service = AnalysisService()
    statuses = service.budget_status([budget(id=1, category_id=1), budget(id=2, category_id=9)], {1: "Food"}, [])
    assert [s.id for s in statuses] == [1]


def test_financial_report_filters_on_range():
    service = AnalysisService()
    transactions = [
        expense(100, on=date(2024, 1, 1)),
        expense(200, category_id=None, on=date(2024, 1, 2)),
        expense(300, on=date(2024, 2, 1)),
        expense(400, on=date(2024, 1, 3), type=TransactionType.INCOME),
    ]
    report = service.financial_report(transactions, {1: "Food"}, DateRange(end_date=date(2024, 1, 31)))
    assert report.total_income == 400
    assert report.total_expenses == 300
    assert report.net_income == 100
    assert [(c.category_id, c.category_name, c.total_amount) for c in report.expense_by_category] == [
        (1, "Food", 100),
        (None, None, 200),
    ]
