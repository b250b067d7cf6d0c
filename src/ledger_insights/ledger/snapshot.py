from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from .models import Account, Expense, Setting, SettingKey, Transaction


class LedgerSource(Protocol):
    """Read side of the ledger store. Every call must see the same consistent state."""

    def list_accounts(self) -> list[Account]: ...

    def list_transactions(self) -> list[Transaction]: ...

    def list_expenses(self) -> list[Expense]: ...

    def get_setting_by_key(self, key: SettingKey) -> Setting | None: ...


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Immutable copy of everything one computation reads.

    Records are kept in the order the source returned them; the engine sorts
    on its own before aggregating.
    """

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    expenses: tuple[Expense, ...] = ()
    settings: tuple[Setting, ...] = ()

    @classmethod
    def capture(cls, source: LedgerSource) -> "LedgerSnapshot":
        settings = tuple(
            s for s in (source.get_setting_by_key(key) for key in SettingKey) if s is not None
        )
        return cls(
            accounts=tuple(source.list_accounts()),
            transactions=tuple(source.list_transactions()),
            expenses=tuple(source.list_expenses()),
            settings=settings,
        )

    def setting(self, key: SettingKey) -> Setting | None:
        for s in self.settings:
            if s.key == key:
                return s
        return None

    def accounts_by_id(self) -> dict[str, Account]:
        return {a.id: a for a in self.accounts}


class InMemoryLedger:
    """LedgerSource over plain lists, used by tests and embedding callers."""

    def __init__(
        self,
        accounts: Iterable[Account] = (),
        transactions: Iterable[Transaction] = (),
        expenses: Iterable[Expense] = (),
        settings: Iterable[Setting] = (),
    ):
        self._accounts = list(accounts)
        self._transactions = list(transactions)
        self._expenses = list(expenses)
        self._settings = {s.key: s for s in settings}

    def list_accounts(self) -> list[Account]:
        return list(self._accounts)

    def list_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def list_expenses(self) -> list[Expense]:
        return list(self._expenses)

    def get_setting_by_key(self, key: SettingKey) -> Setting | None:
        return self._settings.get(key)
