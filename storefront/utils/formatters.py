from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from storefront.config import settings
from storefront.constants import CURRENCY_SYMBOLS, DEFAULT_LOCALE, LOCALE_FORMATS, TITLE_MAX_LENGTH
from storefront.utils.validators import require_non_negative


def money(
    v: Decimal,
    currency: str | None = None,
    locale: str | None = None,
    decimals: int | None = None,
) -> str:
    currency = (currency or settings.currency).upper()
    locale = (locale or settings.locale).replace("_", "-")
    decimals = settings.decimals if decimals is None else decimals
    require_non_negative(decimals, "decimals")

    group, point, pattern = LOCALE_FORMATS.get(locale, LOCALE_FORMATS[DEFAULT_LOCALE])
    amount = Decimal(v).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    whole, _, frac = f"{abs(amount):.{decimals}f}".partition(".")
    text = f"{int(whole):,}".replace(",", group)
    if frac:
        text = f"{text}{point}{frac}"

    # unknown codes are printed as-is, separated from the number
    symbol = CURRENCY_SYMBOLS.get(currency, f" {currency} ")
    out = " ".join(pattern.format(symbol=symbol, amount=text).split())
    return f"-{out}" if amount < 0 else out


def truncate_title(title: str, limit: int = TITLE_MAX_LENGTH) -> str:
    return f"{title[:limit]}..." if len(title) > limit else title
