from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, Mapping

from ..config import load_settings
from ..errors import InputError
from ..ledger.models import Account, Transaction, TransactionType
from ..ledger.snapshot import LedgerSnapshot
from .aggregate import APPLY_BY_KIND, Statistic, aggregate, collect_statistics, seed_running, walk_buckets
from .expenses import cash_movement_by_bucket, rollup_expenses
from .periods import Period, generate_buckets
from .totals import (
    ExternalPolicy,
    TotalType,
    accumulate_totals,
    flow_grouping_totals,
    flow_totals,
    named,
)

logger = logging.getLogger(__name__)


class Category(str, Enum):
    account_balances = "account_balance"
    account_transfers = "account_transfer"
    total_balances = "total_balance"
    total_transfers = "total_transfer"
    flow = "flow"
    flow_grouping = "flow_grouping"
    expenses = "expenses"

    @classmethod
    def parse(cls, raw: str) -> "Category":
        s = (raw or "").strip().lower()
        compact = s.replace("_", "")
        for c in cls:
            if s == c.value or compact == c.name.replace("_", ""):
                return c
        raise InputError(f"Unknown category {raw!r}")


FlowFold = Callable[[Mapping[TotalType, Decimal], Mapping[TotalType, Decimal]], Mapping[Enum, Decimal]]


def _flow_statistics(
    transactions: list[Transaction],
    accounts: tuple[Account, ...],
    buckets: list[date],
    fold: FlowFold,
    policy: ExternalPolicy,
) -> list[Statistic]:
    accounts_by_id = {a.id: a for a in accounts}
    balances = seed_running(accounts_by_id)
    transfers = seed_running(accounts_by_id)
    running_by_kind = {
        TransactionType.balance: balances,
        TransactionType.transfer: transfers,
    }

    def _apply(tx: Transaction) -> None:
        APPLY_BY_KIND[tx.kind](running_by_kind[tx.kind], tx)

    def _reduce() -> dict[str, Decimal]:
        return named(
            fold(
                accumulate_totals(balances, accounts_by_id, policy),
                accumulate_totals(transfers, accounts_by_id, policy),
            )
        )

    return collect_statistics(walk_buckets(transactions, buckets, _apply), _reduce)


def _per_kind(
    transactions: list[Transaction],
    accounts: tuple[Account, ...],
    buckets: list[date],
    kind: TransactionType,
    totals: bool,
    policy: ExternalPolicy,
) -> list[Statistic]:
    accounts_by_id = {a.id: a for a in accounts}

    def _totals(running: Mapping[str, Decimal]) -> dict[str, Decimal]:
        return named(accumulate_totals(running, accounts_by_id, policy))

    return aggregate(
        transactions, accounts_by_id, buckets, kind=kind, reduce=_totals if totals else None
    )


def compute_statistics(
    period: Period | str,
    category: Category | str,
    snapshot: LedgerSnapshot,
    *,
    today: date | None = None,
    external_policy: ExternalPolicy | str | None = None,
    trailing_window: bool | None = None,
) -> list[Statistic]:
    """
    One Statistic per period bucket for the requested report category.

    Buckets run from the first recorded period (or a fixed trailing window)
    up to the period after `today`. Buckets before any data are not reported.
    """
    period = period if isinstance(period, Period) else Period.parse(period)
    category = category if isinstance(category, Category) else Category.parse(category)

    if today is None or external_policy is None or trailing_window is None:
        settings = load_settings()
        today = today or settings.today()
        if external_policy is None:
            external_policy = settings.external_policy
        if trailing_window is None:
            trailing_window = settings.bucket_window == "trailing"
    try:
        policy = ExternalPolicy(external_policy)
    except ValueError as e:
        raise InputError(f"Unknown external account policy {external_policy!r}") from e

    logger.info(
        "Computing statistics period=%s category=%s today=%s policy=%s",
        period.value,
        category.value,
        today,
        policy.value,
    )

    transactions = sorted(snapshot.transactions, key=lambda t: (t.date, t.id))
    expenses = sorted(snapshot.expenses, key=lambda e: (e.date, e.id))

    first_dates = [transactions[0].date] if transactions else []
    if category == Category.expenses and expenses:
        first_dates.append(expenses[0].date)
    if not first_dates:
        logger.info("No records in snapshot, returning empty statistics")
        return []

    buckets = generate_buckets(period, today, None if trailing_window else min(first_dates))
    accounts = snapshot.accounts

    if category == Category.account_balances:
        return _per_kind(transactions, accounts, buckets, TransactionType.balance, False, policy)
    if category == Category.account_transfers:
        return _per_kind(transactions, accounts, buckets, TransactionType.transfer, False, policy)
    if category == Category.total_balances:
        return _per_kind(transactions, accounts, buckets, TransactionType.balance, True, policy)
    if category == Category.total_transfers:
        return _per_kind(transactions, accounts, buckets, TransactionType.transfer, True, policy)
    if category == Category.flow:
        return _flow_statistics(transactions, accounts, buckets, flow_totals, policy)

    grouping = _flow_statistics(
        transactions,
        accounts,
        buckets,
        lambda b, t: flow_grouping_totals(b, t, policy),
        policy,
    )
    if category == Category.flow_grouping:
        return grouping
    return rollup_expenses(expenses, cash_movement_by_bucket(grouping), buckets)
