from __future__ import annotations

from decimal import Decimal, InvalidOperation

from polyredeem.core.errors import InvalidAmount


# CTF position tokens and USDC.e on Polygon both use 6 decimals.
DEFAULT_DECIMALS = 6


def to_units(amount: str, decimals: int = DEFAULT_DECIMALS) -> int:
    """Parse a positive decimal string into smallest-unit integer."""
    if not isinstance(amount, str):
        raise InvalidAmount(amount, "must be a decimal string")
    try:
        d = Decimal(amount.strip())
    except InvalidOperation:
        raise InvalidAmount(amount, "not a number") from None
    if not d.is_finite():
        raise InvalidAmount(amount, "not finite")
    if d <= 0:
        raise InvalidAmount(amount, "must be positive")
    scaled = d.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidAmount(amount, f"more than {decimals} decimal places")
    return int(scaled)


def from_units(units: int, decimals: int = DEFAULT_DECIMALS) -> str:
    d = Decimal(units).scaleb(-decimals)
    s = format(d, "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s or "0"


def add_amounts(amounts: list[str], decimals: int = DEFAULT_DECIMALS) -> str:
    total = sum(int(Decimal(a).scaleb(decimals)) for a in amounts)
    return from_units(total, decimals)
