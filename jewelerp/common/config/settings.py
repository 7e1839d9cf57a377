"""Application settings and environment variables."""

import os
from decimal import Decimal
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_DATABASE: str = os.getenv("DB_NAME", "jewelerp_db")
    DB_USER: str = os.getenv("DB_USER", "user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")

    # Remote datastore used by the original storefront (Supabase / PostgREST)
    SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
    SUPABASE_KEY: Optional[str] = os.getenv("SUPABASE_KEY")

    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "mysql")  # mysql, supabase, memory

    # Ledger dates are the shop's local calendar date, never UTC
    BUSINESS_TIMEZONE: str = os.getenv("BUSINESS_TIMEZONE", "Asia/Yangon")
    MONEY_DECIMAL_PLACES: int = int(os.getenv("MONEY_DECIMAL_PLACES", "2"))

    MANUFACTURING_MARKUP_FACTOR: Decimal = Decimal(os.getenv("MANUFACTURING_MARKUP_FACTOR", "2.5"))
    RECEIPT_MARKUP_FACTOR: Decimal = Decimal(os.getenv("RECEIPT_MARKUP_FACTOR", "1.5"))
    DEFAULT_REORDER_THRESHOLD: int = int(os.getenv("DEFAULT_REORDER_THRESHOLD", "0"))
    ALLOW_NEGATIVE_RAW_MATERIAL: bool = _env_flag("ALLOW_NEGATIVE_RAW_MATERIAL")

    AUDIT_SCHEDULE_ENABLED: bool = _env_flag("AUDIT_SCHEDULE_ENABLED")
    AUDIT_TIME: str = os.getenv("AUDIT_TIME", "23:30")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")  # INFO, DEBUG, WARNING, ERROR, CRITICAL
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")


settings = Settings()
