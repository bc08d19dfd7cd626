from decimal import Decimal

import pytest

from storefront.utils.formatters import money, truncate_title


@pytest.mark.parametrize(
    "amount, kwargs, expected",
    [
        ("109.95", {}, "$109.95"),
        ("0", {}, "$0.00"),
        ("1234567.891", {}, "$1,234,567.89"),
        ("0.005", {}, "$0.01"),
        ("-5", {}, "-$5.00"),
        ("1234.5", {"decimals": 0}, "$1,235"),
        ("10", {"currency": "CHF"}, "CHF 10.00"),
        ("1234.5", {"currency": "EUR", "locale": "fr-FR"}, "1 234,50 €"),
        ("1234.5", {"currency": "CHF", "locale": "de_DE"}, "1.234,50 CHF"),
        ("9.99", {"currency": "gbp", "locale": "en-GB"}, "£9.99"),
        ("9.99", {"locale": "xx-XX"}, "$9.99"),
    ],
)
def test_money(amount, kwargs, expected):
    assert money(Decimal(amount), **kwargs) == expected


def test_truncate_title():
    assert truncate_title("a" * 50) == "a" * 50
    assert truncate_title("a" * 51) == "a" * 50 + "..."
    assert truncate_title("short") == "short"


def test_money_rejects_negative_decimals():
    with pytest.raises(ValueError):
        money(Decimal("1"), decimals=-1)
