# src/kucoin_shared/utils/formatter.py

# --- Built Ins  ---
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

# --- Local Application Imports ---
from ..exchanges.constants import LEGACY_QUOTE_MARKETS


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# --- Helper Functions for Formatting ---
def format_invariant(value: Any) -> str:
    """
    Renders a scalar the way the exchange recomputes it: '.' as the decimal
    separator, no exponent notation, no grouping. Never consults the host locale.

    Examples:
        - Decimal('0.00000001') -> '0.00000001'
        - 1e-08                 -> '0.00000001'
        - True                  -> 'true'
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        return format_invariant(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # repr() is the shortest round-tripping form; Decimal removes the exponent.
        value = Decimal(repr(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot format non-finite number: {value}")
        return format(value, "f")
    return str(value)


def to_dashed_pair(pair: str, markets: Iterable[str] = LEGACY_QUOTE_MARKETS) -> str:
    """Turns an undashed symbol into the exchange's dashed form, e.g. 'ETHBTC' -> 'ETH-BTC'."""
    if "-" in pair:
        return pair
    for market in markets:
        if pair.endswith(market) and len(pair) > len(market):
            return f"{pair[: -len(market)]}-{market}"
    return pair


def to_unix_ms(value: datetime | int) -> int:
    """Accepts an epoch-ms integer or a datetime (naive means UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - _EPOCH) // timedelta(milliseconds=1)
    return int(value)


def to_unix_seconds(value: datetime | int) -> int:
    """Same inputs as to_unix_ms; integers are epoch-ms here too."""
    return to_unix_ms(value) // 1000
