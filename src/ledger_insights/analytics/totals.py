from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Mapping

from ..errors import SnapshotInconsistencyError
from ..ledger.models import Account, AccountType

ZERO = Decimal("0")


class TotalType(str, Enum):
    income = "INCOME"
    net = "NET"
    cash = "CASH"
    short_term_asset = "SHORT_TERM_ASSET"
    long_term_asset = "LONG_TERM_ASSET"
    physical_asset = "PHYSICAL_ASSET"
    retirement = "RETIREMENT_ASSET"
    short_term_liability = "SHORT_TERM_LIABILITY"
    long_term_liability = "LONG_TERM_LIABILITY"


class FlowGroup(str, Enum):
    net = "NET"
    income = "INCOME"
    cash = "CASH"
    gain = "GAIN"
    appreciation = "APPRECIATION"


class ExternalPolicy(str, Enum):
    """What happens to EXTERNAL accounts when values are folded into totals."""

    income = "income"
    exclude = "exclude"


TOTAL_TYPE_BY_ACCOUNT_TYPE: dict[AccountType, TotalType] = {
    AccountType.savings: TotalType.short_term_asset,
    AccountType.checking: TotalType.cash,
    AccountType.loan: TotalType.long_term_liability,
    AccountType.credit_card: TotalType.short_term_liability,
    AccountType.investment: TotalType.long_term_asset,
    AccountType.retirement: TotalType.retirement,
    AccountType.physical_asset: TotalType.physical_asset,
    AccountType.external: TotalType.income,
}

FLOW_GROUP_BY_TOTAL_TYPE: dict[TotalType, FlowGroup] = {
    TotalType.net: FlowGroup.net,
    TotalType.income: FlowGroup.income,
    TotalType.cash: FlowGroup.cash,
    TotalType.short_term_asset: FlowGroup.gain,
    TotalType.long_term_asset: FlowGroup.gain,
    TotalType.short_term_liability: FlowGroup.gain,
    TotalType.long_term_liability: FlowGroup.gain,
    TotalType.retirement: FlowGroup.gain,
    TotalType.physical_asset: FlowGroup.appreciation,
}


def total_types(policy: ExternalPolicy) -> list[TotalType]:
    if policy == ExternalPolicy.exclude:
        return [t for t in TotalType if t != TotalType.income]
    return list(TotalType)


def flow_groups(policy: ExternalPolicy) -> list[FlowGroup]:
    if policy == ExternalPolicy.exclude:
        return [g for g in FlowGroup if g != FlowGroup.income]
    return list(FlowGroup)


def accumulate_totals(
    per_account: Mapping[str, Decimal],
    accounts_by_id: Mapping[str, Account],
    policy: ExternalPolicy = ExternalPolicy.income,
) -> dict[TotalType, Decimal]:
    """Fold per-account values into TotalTypes. NET sums every counted account."""
    out = {t: ZERO for t in total_types(policy)}
    net = ZERO
    for account_id, value in per_account.items():
        account = accounts_by_id.get(account_id)
        if account is None:
            raise SnapshotInconsistencyError(f"No account found for id {account_id!r}")
        if account.type == AccountType.external and policy == ExternalPolicy.exclude:
            continue
        total_type = TOTAL_TYPE_BY_ACCOUNT_TYPE[account.type]
        out[total_type] += value
        net += value
    out[TotalType.net] = net
    return out


def flow_totals(
    balances: Mapping[TotalType, Decimal],
    transfers: Mapping[TotalType, Decimal],
) -> dict[TotalType, Decimal]:
    # the part of a balance change that no transfer explains: interest, gains, spending
    return {t: balances[t] - transfers[t] for t in balances}


def flow_grouping_totals(
    balances: Mapping[TotalType, Decimal],
    transfers: Mapping[TotalType, Decimal],
    policy: ExternalPolicy = ExternalPolicy.income,
) -> dict[FlowGroup, Decimal]:
    out = {g: ZERO for g in flow_groups(policy)}
    for total_type, flow in flow_totals(balances, transfers).items():
        out[FLOW_GROUP_BY_TOTAL_TYPE[total_type]] += flow
    return out


def named(values: Mapping[Enum, Decimal]) -> dict[str, Decimal]:
    return {k.value: v for k, v in values.items()}
