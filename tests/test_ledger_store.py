import json
from datetime import date
from decimal import Decimal

import pytest

from ledger_insights.errors import InputError
from ledger_insights.ledger import AccountType, LedgerSnapshot, SettingKey, TransactionType
from ledger_insights.storage import LedgerStore


def _write_export(root):
    root.mkdir(parents=True, exist_ok=True)
    (root / "accounts.json").write_text(
        json.dumps(
            [
                {"id": "S", "name": "Savings", "type": "SAVINGS"},
                {"id": "E", "name": "Employer", "type": "EXTERNAL"},
            ]
        ),
        encoding="utf-8",
    )
    (root / "transactions.jsonl").write_text(
        "\n".join(
            [
                json.dumps(
                    {
                        "id": "t1",
                        "date": "2024-01-20",
                        "value": 3000,
                        "type": "TRANSFER",
                        "accountId": "S",
                        "fromAccountId": "E",
                    }
                ),
                "",
                json.dumps(
                    {"id": "b1", "date": "2024-02-01", "value": "3010.55", "type": "BALANCE", "accountId": "S"}
                ),
            ]
        ),
        encoding="utf-8",
    )
    (root / "expenses.jsonl").write_text(
        json.dumps({"id": "x1", "category": "GROCERIES", "date": "2024-02-03", "value": "42.10"}) + "\n",
        encoding="utf-8",
    )
    (root / "settings.json").write_text(
        json.dumps([{"id": "1", "key": "NO_REGULAR_BALANCE_ACCOUNTS", "value": "S"}]),
        encoding="utf-8",
    )


def test_reads_export(tmp_path):
    _write_export(tmp_path)
    store = LedgerStore(tmp_path)

    accounts = store.list_accounts()
    assert [(a.id, a.type) for a in accounts] == [("S", AccountType.savings), ("E", AccountType.external)]

    txs = store.list_transactions()
    assert [t.id for t in txs] == ["t1", "b1"]
    assert txs[0].kind == TransactionType.transfer
    assert txs[0].from_account_id == "E"
    assert txs[1].value == Decimal("3010.55")
    assert txs[1].date == date(2024, 2, 1)

    assert store.list_expenses()[0].value == Decimal("42.10")
    assert store.get_setting_by_key(SettingKey.no_regular_balance_accounts).value == "S"
    assert store.get_setting_by_key(SettingKey.repeating_transfers) is None


def test_missing_files_read_as_empty(tmp_path):
    snapshot = LedgerSnapshot.capture(LedgerStore(tmp_path / "nothing-here"))
    assert snapshot.accounts == ()
    assert snapshot.transactions == ()
    assert snapshot.expenses == ()
    assert snapshot.settings == ()


def test_malformed_line_reports_position(tmp_path):
    _write_export(tmp_path)
    with (tmp_path / "transactions.jsonl").open("a", encoding="utf-8") as f:
        f.write('\n{"id": "b2", "date": "2024-02-30", "value": 1, "type": "BALANCE", "accountId": "S"}\n')

    with pytest.raises(InputError, match=r"transactions\.jsonl:4"):
        LedgerStore(tmp_path).list_transactions()


def test_balance_with_source_is_rejected(tmp_path):
    (tmp_path / "transactions.jsonl").write_text(
        json.dumps(
            {"id": "b1", "date": "2024-02-01", "value": 1, "type": "BALANCE", "accountId": "S", "fromAccountId": "E"}
        ),
        encoding="utf-8",
    )
    with pytest.raises(InputError):
        LedgerStore(tmp_path).list_transactions()


@pytest.mark.parametrize("content", ["{not json", '{"id": "S"}', '[{"id": "S", "name": "S", "type": "BOND"}]'])
def test_bad_accounts_file(tmp_path, content):
    (tmp_path / "accounts.json").write_text(content, encoding="utf-8")
    with pytest.raises(InputError):
        LedgerStore(tmp_path).list_accounts()


def test_undecodable_file_is_an_input_error(tmp_path):
    (tmp_path / "transactions.jsonl").write_bytes(b'{"id":"\xff"}\n')
    with pytest.raises(InputError, match=r"transactions\.jsonl"):
        LedgerStore(tmp_path).list_transactions()


def test_unreadable_file_is_an_input_error(tmp_path):
    (tmp_path / "accounts.json").mkdir()
    with pytest.raises(InputError, match=r"accounts\.json"):
        LedgerStore(tmp_path).list_accounts()


def test_settings_file_is_read_once_per_store(tmp_path, monkeypatch):
    _write_export(tmp_path)
    store = LedgerStore(tmp_path)
    reads = []
    original = LedgerStore._read_array

    def _counting(self, name, model):
        reads.append(name)
        return original(self, name, model)

    monkeypatch.setattr(LedgerStore, "_read_array", _counting)

    snapshot = LedgerSnapshot.capture(store)
    assert reads.count("settings.json") == 1
    assert snapshot.setting(SettingKey.no_regular_balance_accounts).value == "S"
    assert snapshot.setting(SettingKey.repeating_transfers) is None


def test_snapshot_is_hashable_and_immutable(tmp_path):
    _write_export(tmp_path)
    snapshot = LedgerSnapshot.capture(LedgerStore(tmp_path))
    assert hash(snapshot) == hash(LedgerSnapshot.capture(LedgerStore(tmp_path)))
    assert isinstance(snapshot.settings, tuple)
