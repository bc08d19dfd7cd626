from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from storefront.utils.validators import require_non_negative

ROOT_DIR = Path(__file__).resolve().parents[1]  # .../storefront project root
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int | None = None) -> int | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_float(*keys: str, default: float | None = None) -> float | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


@dataclass(frozen=True)
class Settings:
    bot_token: str
    currency: str
    locale: str
    decimals: int
    add_to_cart_delay: float
    add_to_cart_timeout: float | None
    log_level: str


def load_settings() -> Settings:
    decimals = _get_int("DECIMALS", default=2)
    decimals = 2 if decimals is None else decimals
    require_non_negative(decimals, "DECIMALS")
    return Settings(
        bot_token=_get_env("BOT_TOKEN", "TELEGRAM_BOT_TOKEN", default="") or "",
        currency=(_get_env("CURRENCY", default="USD") or "USD").upper(),
        locale=_get_env("LOCALE", default="en-US") or "en-US",
        decimals=decimals,
        add_to_cart_delay=_get_float("ADD_TO_CART_DELAY", default=0.5) or 0.0,
        add_to_cart_timeout=_get_float("ADD_TO_CART_TIMEOUT", default=None),
        log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
    )


settings = load_settings()
