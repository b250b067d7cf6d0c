import pytest

from ledger_insights.config import load_settings


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    for name in (
        "LEDGER_DATA_DIR",
        "LEDGER_TIMEZONE",
        "LEDGER_EXTERNAL_POLICY",
        "LEDGER_BUCKET_WINDOW",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()
