from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from ..errors import InputError
from .models import RepeatingTransfer, SettingKey
from .snapshot import LedgerSnapshot

_repeating_adapter = TypeAdapter(list[RepeatingTransfer])


def parse_account_id_list(raw: str | None) -> frozenset[str]:
    """Comma-joined account ids -> set. Blank entries are dropped."""
    if not raw:
        return frozenset()
    return frozenset(x.strip() for x in raw.split(",") if x.strip())


def parse_repeating_transfers(raw: str | None) -> list[RepeatingTransfer]:
    if raw is None or not raw.strip():
        return []
    try:
        return _repeating_adapter.validate_json(raw)
    except ValidationError as e:
        raise InputError(f"Malformed {SettingKey.repeating_transfers.value} setting: {e}") from e


def ignored_accounts(snapshot: LedgerSnapshot, key: SettingKey) -> frozenset[str]:
    s = snapshot.setting(key)
    return parse_account_id_list(s.value if s is not None else None)


def repeating_transfers(snapshot: LedgerSnapshot) -> list[RepeatingTransfer]:
    s = snapshot.setting(SettingKey.repeating_transfers)
    return parse_repeating_transfers(s.value if s is not None else None)
