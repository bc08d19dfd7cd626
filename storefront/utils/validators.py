from decimal import Decimal


def require_non_negative(v: Decimal, name: str = "value") -> None:
    if v < 0:
        raise ValueError(f"{name} must be >= 0")


def require_between(v: Decimal, low: Decimal, high: Decimal, name: str = "value") -> None:
    if not low <= v <= high:
        raise ValueError(f"{name} must be between {low} and {high}")


def require_at_least(v: Decimal, floor: Decimal, name: str = "value") -> None:
    if v < floor:
        raise ValueError(f"{name} must be >= {floor}")
