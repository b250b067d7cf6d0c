from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Iterator, Mapping, Protocol, TypeVar

from ..errors import SnapshotInconsistencyError
from ..ledger.models import Transaction, TransactionType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

RunningValues = dict[str, Decimal]


@dataclass(frozen=True)
class Value:
    name: str
    value: Decimal
    value_difference: Decimal


@dataclass(frozen=True)
class Statistic:
    date: date
    values: tuple[Value, ...]

    def get(self, name: str) -> Value | None:
        for v in self.values:
            if v.name == name:
                return v
        return None


class Dated(Protocol):
    @property
    def date(self) -> date: ...


R = TypeVar("R", bound=Dated)


def seed_running(account_ids: Iterable[str]) -> RunningValues:
    return {acc_id: ZERO for acc_id in account_ids}


def _require(running: RunningValues, account_id: str | None, tx: Transaction) -> str:
    if account_id is None or account_id not in running:
        raise SnapshotInconsistencyError(
            f"Transaction {tx.id} on {tx.date} references unknown account {account_id!r}"
        )
    return account_id


def apply_balance(running: RunningValues, tx: Transaction) -> None:
    running[_require(running, tx.account_id, tx)] = tx.value


def apply_transfer(running: RunningValues, tx: Transaction) -> None:
    to_id = _require(running, tx.account_id, tx)
    from_id = _require(running, tx.from_account_id, tx)
    running[from_id] -= tx.value
    running[to_id] += tx.value


APPLY_BY_KIND: dict[TransactionType, Callable[[RunningValues, Transaction], None]] = {
    TransactionType.balance: apply_balance,
    TransactionType.transfer: apply_transfer,
}


def walk_buckets(
    records: Iterable[R],
    buckets: Iterable[date],
    apply: Callable[[R], None],
) -> Iterator[tuple[date, bool]]:
    """
    Linear merge of date-sorted records with ascending buckets.

    Every record dated on or before a bucket is applied before that bucket is
    yielded. The flag tells whether any record has been applied so far.
    """
    it = iter(records)
    pending = next(it, None)
    started = False
    for day in buckets:
        while pending is not None and pending.date <= day:
            apply(pending)
            started = True
            pending = next(it, None)
        yield day, started


def build_statistic(
    day: date,
    current: Mapping[str, Decimal],
    previous: Mapping[str, Decimal],
) -> Statistic:
    values = tuple(
        Value(
            name=name,
            value=value,
            value_difference=(value - previous[name]) if name in previous else ZERO,
        )
        for name, value in current.items()
    )
    return Statistic(date=day, values=values)


def collect_statistics(
    walk: Iterable[tuple[date, bool]],
    reduce: Callable[[], Mapping[str, Decimal]],
) -> list[Statistic]:
    """Emit one Statistic per started bucket; `reduce` must return a fresh mapping."""
    out: list[Statistic] = []
    previous: Mapping[str, Decimal] = {}
    for day, started in walk:
        if not started:
            continue
        current = reduce()
        out.append(build_statistic(day, current, previous))
        previous = current
    return out


def aggregate(
    transactions: Iterable[Transaction],
    account_ids: Iterable[str],
    buckets: list[date],
    *,
    kind: TransactionType,
    reduce: Callable[[RunningValues], Mapping[str, Decimal]] | None = None,
) -> list[Statistic]:
    """
    Per-account running values for one transaction kind, snapshotted per bucket.

    BALANCE overwrites the account value, TRANSFER moves value between the two
    accounts. Without a reducer the values are reported per account id.
    """
    running = seed_running(account_ids)
    apply_fn = APPLY_BY_KIND[kind]
    selected = [t for t in transactions if t.kind == kind]

    def _reduce() -> Mapping[str, Decimal]:
        if reduce is None:
            return dict(sorted(running.items()))
        return reduce(running)

    stats = collect_statistics(
        walk_buckets(selected, buckets, lambda t: apply_fn(running, t)),
        _reduce,
    )
    logger.debug("Aggregated %d %s transactions into %d rows", len(selected), kind.value, len(stats))
    return stats
