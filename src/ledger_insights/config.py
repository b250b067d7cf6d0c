from __future__ import annotations

from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default=Path(".ledger"), alias="LEDGER_DATA_DIR")
    timezone: str = Field(default="UTC", alias="LEDGER_TIMEZONE")

    # "income" folds EXTERNAL accounts into the INCOME total, "exclude" drops them
    external_policy: Literal["income", "exclude"] = Field(
        default="income", alias="LEDGER_EXTERNAL_POLICY"
    )
    # "data" starts buckets at the first transaction, "trailing" uses a fixed window
    bucket_window: Literal["data", "trailing"] = Field(default="data", alias="LEDGER_BUCKET_WINDOW")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    def today(self) -> date:
        return datetime.now(tz=ZoneInfo(self.timezone)).date()


@lru_cache
def load_settings() -> Settings:
    return Settings()
