from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Mapping

from ..config import load_settings
from ..errors import InputError
from ..ledger.models import (
    Account,
    AccountType,
    DateRepeat,
    RepeatingTransfer,
    SettingKey,
    Transaction,
    TransactionType,
)
from ..ledger.settings import ignored_accounts, repeating_transfers
from ..ledger.snapshot import LedgerSnapshot

logger = logging.getLogger(__name__)

# upper bound on schedule steps walked per repeating transfer
MAX_SCHEDULE_STEPS = 100_000


class IssueType(str, Enum):
    transfer_without_balance = "TRANSFER_WITHOUT_BALANCE"
    no_balance = "NO_BALANCE"
    no_transfer = "NO_TRANSFER"


@dataclass(frozen=True)
class Issue:
    type: IssueType
    date: date | None = None
    account_id: str | None = None
    from_account_id: str | None = None


_ISSUE_TYPE_ORDER = {t: i for i, t in enumerate(IssueType)}
_ACCOUNT_TYPE_ORDER = {t: i for i, t in enumerate(AccountType)}


def _add_months_clamped(day: date, months: int) -> date:
    total = day.month - 1 + months
    year = day.year + total // 12
    month = total % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def occurrence(schedule: RepeatingTransfer, index: int) -> date:
    """The index-th occurrence of a schedule; index 0 is the start date."""
    units = index * schedule.repeat_count
    if schedule.repeat == DateRepeat.daily:
        return schedule.start + timedelta(days=units)
    if schedule.repeat == DateRepeat.weekly:
        return schedule.start + timedelta(weeks=units)
    # stepping from the start keeps a 31st anchored instead of drifting to the 28th
    return _add_months_clamped(schedule.start, units)


def latest_due_date(schedule: RepeatingTransfer, today: date) -> date | None:
    """Latest scheduled occurrence on or before today, None when not started yet."""
    if schedule.start > today:
        return None
    current = schedule.start
    for index in range(1, MAX_SCHEDULE_STEPS + 1):
        nxt = occurrence(schedule, index)
        if nxt > today:
            return current
        current = nxt
    raise InputError(
        f"Repeating transfer from {schedule.from_account_id} starting {schedule.start} "
        f"exceeded {MAX_SCHEDULE_STEPS} steps"
    )


def _transfers_without_balance(
    transactions: Iterable[Transaction],
    ignored: frozenset[str],
) -> list[Issue]:
    balances: set[tuple[str, date]] = set()
    touched: set[tuple[str, date]] = set()

    for t in transactions:
        if t.kind == TransactionType.balance:
            balances.add((t.account_id, t.date))
            continue
        touched.add((t.account_id, t.date))
        if t.from_account_id is not None:
            touched.add((t.from_account_id, t.date))

    return [
        Issue(type=IssueType.transfer_without_balance, date=day, account_id=account_id)
        for account_id, day in touched
        if account_id not in ignored and (account_id, day) not in balances
    ]


def _missing_regular_balances(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    ignored: frozenset[str],
    today: date,
) -> list[Issue]:
    month_start = today.replace(day=1)
    with_balance = {
        t.account_id
        for t in transactions
        if t.kind == TransactionType.balance and t.date == month_start
    }
    return [
        Issue(type=IssueType.no_balance, date=month_start, account_id=a.id)
        for a in accounts
        if a.type != AccountType.external and a.id not in ignored and a.id not in with_balance
    ]


def _missed_transfers(
    transactions: Iterable[Transaction],
    accounts_by_id: Mapping[str, Account],
    schedules: Iterable[RepeatingTransfer],
    today: date,
) -> list[Issue]:
    realized = {
        (t.from_account_id, t.account_id, t.date)
        for t in transactions
        if t.kind == TransactionType.transfer
    }
    out: list[Issue] = []
    for schedule in schedules:
        for account_id in (schedule.from_account_id, *schedule.to_account_ids):
            if account_id not in accounts_by_id:
                raise InputError(f"Repeating transfer references unknown account {account_id!r}")

        due = latest_due_date(schedule, today)
        if due is None:
            continue
        for to_id in schedule.to_account_ids:
            if (schedule.from_account_id, to_id, due) not in realized:
                out.append(
                    Issue(
                        type=IssueType.no_transfer,
                        date=due,
                        account_id=to_id,
                        from_account_id=schedule.from_account_id,
                    )
                )
    return out


def sort_issues(issues: Iterable[Issue], accounts_by_id: Mapping[str, Account]) -> list[Issue]:
    """Newest first, then by issue type, then by account (type, name); unknown accounts last."""

    def _key(issue: Issue) -> tuple:
        date_key = (0, -issue.date.toordinal()) if issue.date is not None else (1, 0)
        account = accounts_by_id.get(issue.account_id) if issue.account_id else None
        if account is not None:
            account_key = (0, _ACCOUNT_TYPE_ORDER[account.type], account.name)
        else:
            account_key = (1, 0, "")
        return (
            date_key,
            _ISSUE_TYPE_ORDER[issue.type],
            account_key,
            issue.account_id or "",
            issue.from_account_id or "",
        )

    return sorted(issues, key=_key)


def detect_issues(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    *,
    today: date,
    transfer_ignored: frozenset[str] = frozenset(),
    no_balance_ignored: frozenset[str] = frozenset(),
    schedules: Iterable[RepeatingTransfer] = (),
) -> list[Issue]:
    transactions = list(transactions)
    accounts = list(accounts)
    accounts_by_id = {a.id: a for a in accounts}

    issues = _transfers_without_balance(transactions, transfer_ignored)
    issues += _missing_regular_balances(transactions, accounts, no_balance_ignored, today)
    issues += _missed_transfers(transactions, accounts_by_id, schedules, today)
    return sort_issues(issues, accounts_by_id)


def compute_issues(snapshot: LedgerSnapshot, *, today: date | None = None) -> list[Issue]:
    today = today or load_settings().today()
    logger.info("Computing issues today=%s", today)

    issues = detect_issues(
        sorted(snapshot.transactions, key=lambda t: (t.date, t.id)),
        snapshot.accounts,
        today=today,
        transfer_ignored=ignored_accounts(snapshot, SettingKey.transfer_without_balance_ignored_accounts),
        no_balance_ignored=ignored_accounts(snapshot, SettingKey.no_regular_balance_accounts),
        schedules=repeating_transfers(snapshot),
    )
    logger.debug("Detected %d issues", len(issues))
    return issues
