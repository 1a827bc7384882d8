# sms-expense-parser/config.py
"""
Runtime settings read from the environment and an optional .env file
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).parent / '.env')


@dataclass(frozen=True)
class Settings:
    decimal_mark: str = "."
    merchant_max_length: int = 40
    scan_limit: int = 500
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults"""
    decimal_mark = os.getenv("SMS_DECIMAL_MARK", ".")
    if decimal_mark not in (".", ","):
        raise ValueError(f"SMS_DECIMAL_MARK must be '.' or ',', got {decimal_mark!r}")

    return Settings(
        decimal_mark=decimal_mark,
        merchant_max_length=int(os.getenv("SMS_MERCHANT_MAX_LENGTH", "40")),
        scan_limit=int(os.getenv("SMS_SCAN_LIMIT", "500")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
