from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import InputError
from ..ledger.models import Account, Expense, Setting, SettingKey, Transaction

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class LedgerStore:
    """
    Read-only ledger export on local disk:

      <root>/accounts.json        JSON array of accounts
      <root>/transactions.jsonl   one transaction per line
      <root>/expenses.jsonl       one expense per line
      <root>/settings.json        JSON array of {id, key, value}

    Missing files read as empty collections. Field names follow the wire
    format (accountId, fromAccountId, type, ...). settings.json is read once
    per store instance.
    """

    def __init__(self, root_dir: Path | None = None):
        self.root_dir = root_dir or Path(".ledger")
        self._settings: dict[SettingKey, Setting] | None = None

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise InputError(f"{path}: {e}") from e

    def _read_array(self, name: str, model: type[M]) -> list[M]:
        path = self.root_dir / name
        if not path.exists():
            return []
        try:
            raw = json.loads(self._read_text(path))
        except json.JSONDecodeError as e:
            raise InputError(f"{path}: invalid JSON: {e}") from e
        if not isinstance(raw, list):
            raise InputError(f"{path}: expected a JSON array")
        try:
            return [model.model_validate(obj) for obj in raw]
        except ValidationError as e:
            raise InputError(f"{path}: {e}") from e

    def _read_lines(self, name: str, model: type[M]) -> list[M]:
        path = self.root_dir / name
        if not path.exists():
            return []
        rows: list[M] = []
        for lineno, line in enumerate(self._read_text(path).splitlines(), start=1):
            if not line.strip():
                continue
            try:
                rows.append(model.model_validate_json(line))
            except ValidationError as e:
                raise InputError(f"{path}:{lineno}: {e}") from e
        logger.debug("Loaded %d rows from %s", len(rows), path)
        return rows

    def list_accounts(self) -> list[Account]:
        return self._read_array("accounts.json", Account)

    def list_transactions(self) -> list[Transaction]:
        return self._read_lines("transactions.jsonl", Transaction)

    def list_expenses(self) -> list[Expense]:
        return self._read_lines("expenses.jsonl", Expense)

    def get_setting_by_key(self, key: SettingKey) -> Setting | None:
        if self._settings is None:
            self._settings = {s.key: s for s in self._read_array("settings.json", Setting)}
        return self._settings.get(key)
