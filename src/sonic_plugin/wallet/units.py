"""Conversion between wei and decimal native-unit amounts (18 decimals)."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from web3 import Web3


def format_native(amount_wei: int) -> str:
    """Render a wei amount as a decimal string.

    The result always carries a fractional part with trailing zeros removed,
    so ``10**18`` gives ``"1.0"`` and ``0`` gives ``"0.0"``.
    """
    if amount_wei < 0:
        raise ValueError(f"Wei amount must be non-negative, got {amount_wei}")
    text = format(Web3.from_wei(amount_wei, "ether"), "f")
    whole, _, frac = text.partition(".")
    return f"{whole}.{frac.rstrip('0') or '0'}"


def to_decimal(amount: str | int | float | Decimal) -> Decimal:
    """Parse a native-unit amount, rejecting negative, NaN and infinite values."""
    if isinstance(amount, bool):
        raise ValueError("Amount must be a number, not a boolean")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Amount '{amount}' is not a decimal number") from exc
    if not value.is_finite():
        raise ValueError(f"Amount '{amount}' is not a finite number")
    if value < 0:
        raise ValueError(f"Amount '{amount}' is negative")
    return value


def parse_native(amount: str | int | float | Decimal) -> int:
    """Convert a decimal native-unit amount to wei.

    Digits beyond the 18th decimal place are rejected rather than truncated.
    """
    value = to_decimal(amount)
    wei = value.scaleb(18)
    if wei != wei.to_integral_value():
        raise ValueError(f"Amount '{amount}' has more than 18 decimal places")
    return Web3.to_wei(value, "ether")
