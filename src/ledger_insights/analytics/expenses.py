from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping

from ..ledger.models import Expense, ExpenseCategory
from .aggregate import Statistic, build_statistic, walk_buckets

ZERO = Decimal("0")

TOTAL_KEY = "TOTAL"
CASH_KEY = "CASH"


def cash_movement_by_bucket(flow_grouping: Iterable[Statistic]) -> dict[date, Decimal]:
    """Absolute CASH flow change per bucket, taken from a flow-grouping report."""
    out: dict[date, Decimal] = {}
    for stat in flow_grouping:
        cash = stat.get(CASH_KEY)
        out[stat.date] = abs(cash.value_difference) if cash is not None else ZERO
    return out


def rollup_expenses(
    expenses: Iterable[Expense],
    cash_by_bucket: Mapping[date, Decimal],
    buckets: list[date],
) -> list[Statistic]:
    """
    Running expense totals per category plus TOTAL, alongside CASH: the
    accumulated absolute cash movement, so spending can be compared with it.

    Expenses only ever add. Rows start at the first bucket holding an expense.
    """
    running: dict[str, Decimal] = {c.value: ZERO for c in ExpenseCategory}
    running[TOTAL_KEY] = ZERO
    running[CASH_KEY] = ZERO

    def _add(expense: Expense) -> None:
        running[expense.category.value] += expense.value
        running[TOTAL_KEY] += expense.value

    out: list[Statistic] = []
    previous: dict[str, Decimal] = {}
    for day, started in walk_buckets(expenses, buckets, _add):
        running[CASH_KEY] += cash_by_bucket.get(day, ZERO)
        if not started:
            continue
        current = dict(running)
        out.append(build_statistic(day, current, previous))
        previous = current
    return out
