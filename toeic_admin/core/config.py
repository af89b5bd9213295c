from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


def _load_dotenv() -> None:
    if os.getenv("TOEIC_SKIP_DOTENV") == "1":
        return

    env_path = Path(__file__).resolve().parents[2] / ".env"
    if not env_path.exists():
        return

    load_dotenv(env_path, override=True)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_positive_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    raw = value.strip()
    if not raw:
        return default
    try:
        parsed = float(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class Settings:
    env: str
    app_name: str
    cors_origins: list[str]
    database_url: str | None
    catalog_backend: str
    catalog_base_url: str | None
    catalog_api_token: str | None
    catalog_timeout_seconds: float
    draft_storage_key: str
    question_bank_key: str
    log_level: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_dotenv()

    env = os.getenv("TOEIC_ENV", "development")
    cors = os.getenv("TOEIC_CORS_ORIGINS", "http://localhost:5173")
    catalog_backend = os.getenv("TOEIC_CATALOG_BACKEND", "mock").strip().lower() or "mock"
    catalog_timeout_seconds = _parse_positive_float(os.getenv("TOEIC_CATALOG_TIMEOUT_SECONDS"), default=15.0)
    draft_storage_key = os.getenv("TOEIC_DRAFT_STORAGE_KEY", "tests_v1").strip() or "tests_v1"
    question_bank_key = os.getenv("TOEIC_QUESTION_BANK_KEY", "questionBank").strip() or "questionBank"
    log_level = os.getenv("TOEIC_LOG_LEVEL", "INFO").strip().upper() or "INFO"

    return Settings(
        env=env,
        app_name="TOEIC Admin API",
        cors_origins=_split_csv(cors),
        database_url=os.getenv("DATABASE_URL") or None,
        catalog_backend=catalog_backend,
        catalog_base_url=(os.getenv("TOEIC_CATALOG_BASE_URL") or "").strip() or None,
        catalog_api_token=os.getenv("TOEIC_CATALOG_API_TOKEN") or None,
        catalog_timeout_seconds=catalog_timeout_seconds,
        draft_storage_key=draft_storage_key,
        question_bank_key=question_bank_key,
        log_level=log_level,
    )
