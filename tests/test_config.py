from pathlib import Path

import pytest
from pydantic import ValidationError

from ledger_insights.config import Settings, load_settings


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    s = load_settings()
    assert s.data_dir == Path(".ledger")
    assert s.timezone == "UTC"
    assert s.external_policy == "income"
    assert s.bucket_window == "data"
    assert s.log_level == "INFO"


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LEDGER_DATA_DIR", str(tmp_path / "export"))
    monkeypatch.setenv("LEDGER_TIMEZONE", "Europe/Kyiv")
    monkeypatch.setenv("LEDGER_EXTERNAL_POLICY", "exclude")
    monkeypatch.setenv("LEDGER_BUCKET_WINDOW", "trailing")

    s = load_settings()
    assert s.data_dir == tmp_path / "export"
    assert s.timezone == "Europe/Kyiv"
    assert s.external_policy == "exclude"
    assert s.bucket_window == "trailing"


def test_env_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("LEDGER_EXTERNAL_POLICY=exclude\n", encoding="utf-8")
    assert load_settings().external_policy == "exclude"


def test_settings_are_cached(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_settings() is load_settings()


@pytest.mark.parametrize(
    "name,value",
    [
        ("LEDGER_TIMEZONE", "Mars/Olympus"),
        ("LEDGER_EXTERNAL_POLICY", "ignore"),
        ("LEDGER_BUCKET_WINDOW", "forever"),
    ],
)
def test_invalid_values(tmp_path, monkeypatch, name, value):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings()
