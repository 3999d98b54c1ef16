"""Unit conversion between whole-coin amounts and minor units."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from rosetta_wallet.errors.construction_errors import InvalidAmount


def to_minor_units(value: str | int | Decimal, decimals: int) -> int:
    """Convert a whole-coin amount (e.g. ``"0.1"`` tBTC) to minor units.

    Raises:
        InvalidAmount: If the value is not a positive number representable
            in whole minor units.
    """
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        msg = f"not a number: {value!r}"
        raise InvalidAmount(msg) from exc
    if not amount.is_finite() or amount <= 0:
        msg = f"amount must be positive, got {value!r}"
        raise InvalidAmount(msg)

    minor = amount.scaleb(decimals)
    if minor != minor.to_integral_value():
        msg = f"{value!r} has more than {decimals} decimal places"
        raise InvalidAmount(msg)
    return int(minor)


def format_amount(minor: int, decimals: int) -> str:
    """Human-readable whole-coin string with ``decimals`` places."""
    return f"{Decimal(minor).scaleb(-decimals):.{decimals}f}"
