from .models import (
    Account,
    AccountType,
    DateRepeat,
    Expense,
    ExpenseCategory,
    RepeatingTransfer,
    Setting,
    SettingKey,
    Transaction,
    TransactionType,
)
from .snapshot import InMemoryLedger, LedgerSnapshot, LedgerSource

__all__ = [
    "Account",
    "AccountType",
    "DateRepeat",
    "Expense",
    "ExpenseCategory",
    "InMemoryLedger",
    "LedgerSnapshot",
    "LedgerSource",
    "RepeatingTransfer",
    "Setting",
    "SettingKey",
    "Transaction",
    "TransactionType",
]
