from datetime import date
from decimal import Decimal

from ledger_insights.analytics.aggregate import Statistic, Value
from ledger_insights.analytics.expenses import (
    CASH_KEY,
    TOTAL_KEY,
    cash_movement_by_bucket,
    rollup_expenses,
)
from ledger_insights.ledger.models import Expense, ExpenseCategory

BUCKETS = [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1), date(2024, 4, 1)]


def expense(category: ExpenseCategory, day: date, value: str) -> Expense:
    return Expense(
        id=f"e-{category.value}-{day}",
        description=category.value.lower(),
        category=category,
        date=day,
        value=Decimal(value),
    )


def _values(stat: Statistic) -> dict[str, tuple[Decimal, Decimal]]:
    return {v.name: (v.value, v.value_difference) for v in stat.values}


def test_rollup_accumulates_categories_total_and_cash():
    expenses = [
        expense(ExpenseCategory.groceries, date(2024, 2, 10), "120.00"),
        expense(ExpenseCategory.restaurants, date(2024, 2, 20), "30.50"),
        expense(ExpenseCategory.groceries, date(2024, 3, 2), "80.00"),
    ]
    cash = {date(2024, 2, 1): Decimal("10.00"), date(2024, 3, 1): Decimal("1800.00")}

    stats = rollup_expenses(expenses, cash, BUCKETS)

    assert [s.date for s in stats] == [date(2024, 3, 1), date(2024, 4, 1)]
    names = [v.name for v in stats[0].values]
    assert names[: len(ExpenseCategory)] == [c.value for c in ExpenseCategory]
    assert names[-2:] == [TOTAL_KEY, CASH_KEY]

    first = _values(stats[0])
    assert first["GROCERIES"] == (Decimal("120.00"), 0)
    assert first["RESTAURANTS"] == (Decimal("30.50"), 0)
    assert first[TOTAL_KEY] == (Decimal("150.50"), 0)
    # cash keeps accumulating before the first expense shows up
    assert first[CASH_KEY] == (Decimal("1810.00"), 0)

    second = _values(stats[1])
    assert second["GROCERIES"] == (Decimal("200.00"), Decimal("80.00"))
    assert second[TOTAL_KEY] == (Decimal("230.50"), Decimal("80.00"))
    assert second[CASH_KEY] == (Decimal("1810.00"), 0)


def test_rollup_without_expenses_is_empty():
    assert rollup_expenses([], {date(2024, 2, 1): Decimal("5")}, BUCKETS) == []


def test_cash_movement_uses_absolute_difference():
    grouping = [
        Statistic(date(2024, 2, 1), (Value("CASH", Decimal("10"), Decimal("0")),)),
        Statistic(date(2024, 3, 1), (Value("CASH", Decimal("-40"), Decimal("-50")),)),
        Statistic(date(2024, 4, 1), (Value("GAIN", Decimal("1"), Decimal("1")),)),
    ]
    assert cash_movement_by_bucket(grouping) == {
        date(2024, 2, 1): Decimal("0"),
        date(2024, 3, 1): Decimal("50"),
        date(2024, 4, 1): Decimal("0"),
    }
