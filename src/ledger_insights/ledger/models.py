from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AccountType(str, Enum):
    # declaration order is the sort order used when ranking issues
    savings = "SAVINGS"
    checking = "CHECKING"
    loan = "LOAN"
    credit_card = "CREDIT_CARD"
    investment = "INVESTMENT"
    retirement = "RETIREMENT"
    physical_asset = "PHYSICAL_ASSET"
    external = "EXTERNAL"


class TransactionType(str, Enum):
    balance = "BALANCE"
    transfer = "TRANSFER"


class ExpenseCategory(str, Enum):
    unknown = "UNKNOWN"
    other = "OTHER"
    bills = "BILLS"
    clothing = "CLOTHING"
    electronics = "ELECTRONICS"
    entertainment = "ENTERTAINMENT"
    fitness = "FITNESS"
    groceries = "GROCERIES"
    house = "HOUSE"
    maintenance = "MAINTENANCE"
    medical = "MEDICAL"
    pets = "PETS"
    restaurants = "RESTAURANTS"
    smart_home = "SMART_HOME"
    subscriptions = "SUBSCRIPTIONS"
    vacations = "VACATIONS"


class SettingKey(str, Enum):
    default_transaction_from_account_id = "DEFAULT_TRANSACTION_FROM_ACCOUNT_ID"
    transfer_without_balance_ignored_accounts = "TRANSFER_WITHOUT_BALANCE_IGNORED_ACCOUNTS"
    no_regular_balance_accounts = "NO_REGULAR_BALANCE_ACCOUNTS"
    repeating_transfers = "REPEATING_TRANSFERS"


class DateRepeat(str, Enum):
    daily = "DAILY"
    weekly = "WEEKLY"
    monthly = "MONTHLY"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Account(_Record):
    id: str
    name: str
    type: AccountType


class Transaction(_Record):
    id: str
    description: str | None = None
    date: dt.date
    value: Decimal
    kind: TransactionType = Field(alias="type")
    account_id: str = Field(alias="accountId")
    from_account_id: str | None = Field(default=None, alias="fromAccountId")

    @model_validator(mode="after")
    def _source_matches_kind(self) -> "Transaction":
        if self.kind == TransactionType.balance and self.from_account_id is not None:
            raise ValueError("BALANCE transactions cannot have fromAccountId")
        if self.kind == TransactionType.transfer and not self.from_account_id:
            raise ValueError("TRANSFER transactions require fromAccountId")
        return self


class Expense(_Record):
    id: str
    description: str = ""
    external: str | None = None
    category: ExpenseCategory
    date: dt.date
    value: Decimal


class Setting(_Record):
    id: str
    key: SettingKey
    value: str


class RepeatingTransfer(_Record):
    start: dt.date
    repeat: DateRepeat
    repeat_count: int = Field(gt=0, alias="repeatCount")
    from_account_id: str = Field(alias="fromAccountId")
    to_account_ids: list[str] = Field(min_length=1, alias="toAccountIds")

    @field_validator("to_account_ids")
    @classmethod
    def _no_blank_destinations(cls, value: list[str]) -> list[str]:
        if any(not x.strip() for x in value):
            raise ValueError("toAccountIds cannot contain blank ids")
        return value

    @model_validator(mode="after")
    def _source_not_destination(self) -> "RepeatingTransfer":
        if self.from_account_id in self.to_account_ids:
            raise ValueError("fromAccountId cannot also be a destination")
        return self
