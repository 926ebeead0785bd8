"""Conversion between display amounts and integer base units.

All arithmetic is done on Python integers; on-chain amounts routinely
exceed the range a float can represent exactly.
"""

import re
from decimal import Decimal
from typing import Iterable, List, Union

from .exceptions import InvalidAmount
from .types import Coin

Amount = Union[str, int, float, Decimal]

_DECIMAL_RE = re.compile(r"^([0-9]*)(?:\.([0-9]*))?$")
_INTEGER_RE = re.compile(r"^[0-9]+$")
_COIN_RE = re.compile(r"^([0-9]+)([a-zA-Z][a-zA-Z0-9/:._-]*)$")


def to_base_units(amount: Amount, decimals: int) -> str:
    """Convert a decimal display amount to an integer base-unit string.

    ``to_base_units("1.5", 6) == "1500000"``. More fractional digits than
    ``decimals`` allows raises ``InvalidAmount``.
    """
    if decimals < 0:
        raise InvalidAmount(f"Decimals must be non-negative, got {decimals}")
    if isinstance(amount, bool):
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    if isinstance(amount, float):
        # repr gives the shortest round-tripping literal
        amount = Decimal(repr(amount))
    if isinstance(amount, Decimal):
        if not amount.is_finite():
            raise InvalidAmount(f"Invalid amount: {amount}")
        text = format(amount, "f")
    else:
        text = str(amount).strip()

    match = _DECIMAL_RE.match(text)
    if not match or text in ("", "."):
        raise InvalidAmount(f"Invalid amount: {amount!r}")

    whole, fraction = match.group(1) or "0", match.group(2) or ""
    if len(fraction) > decimals:
        # Trailing zeros carry no precision
        stripped = fraction.rstrip("0")
        if len(stripped) > decimals:
            raise InvalidAmount(
                f"Amount {text} has more than {decimals} fractional digits"
            )
        fraction = stripped

    return str(int(whole + fraction.ljust(decimals, "0")))


def to_decimal_units(base_amount: Amount, decimals: int) -> str:
    """Render an integer base-unit amount with exactly ``decimals`` fractional digits."""
    if decimals < 0:
        raise InvalidAmount(f"Decimals must be non-negative, got {decimals}")
    value = _parse_integer(base_amount)
    if decimals == 0:
        return str(value)
    whole, fraction = divmod(value, 10 ** decimals)
    return f"{whole}.{str(fraction).zfill(decimals)}"


def display_symbol(denom: str) -> str:
    """Display symbol for a denom: ``uatom`` -> ``ATOM``."""
    if denom.startswith("u") and len(denom) > 1:
        return denom[1:].upper()
    return denom.upper()


def format_display(base_amount: Amount, denom: str, decimals: int = 6) -> str:
    """Human readable amount, e.g. ``"1.500000 ATOM"``."""
    return f"{to_decimal_units(base_amount, decimals)} {display_symbol(denom)}"


def parse_coin_string(text: str) -> Coin:
    """Parse ``"100uatom"`` into a ``Coin``."""
    match = _COIN_RE.match(text.strip())
    if not match:
        raise InvalidAmount(f"Invalid amount string: {text}")
    return Coin(denom=match.group(2), amount=str(int(match.group(1))))


def parse_coins(text: str) -> List[Coin]:
    """Parse a comma separated coin list such as ``"100uatom, 5uosmo"``."""
    if not text or not text.strip():
        return []
    return [parse_coin_string(part) for part in text.split(",")]


def format_coin_string(coin: Coin) -> str:
    return f"{coin.amount}{coin.denom}"


def format_coins(coins: Iterable[Coin]) -> str:
    return ", ".join(format_coin_string(c) for c in coins)


def sum_coins(coins: Iterable[Coin], denom: str) -> str:
    """Sum the amounts of every coin in ``denom``; ``"0"`` if none match."""
    return str(sum(_parse_integer(c.amount) for c in coins if c.denom == denom))


def _parse_integer(value: Amount) -> int:
    if isinstance(value, bool):
        raise InvalidAmount(f"Invalid integer amount: {value!r}")
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if not _INTEGER_RE.match(text):
            raise InvalidAmount(f"Invalid integer amount: {value!r}")
        number = int(text)
    if number < 0:
        raise InvalidAmount(f"Amount must be non-negative, got {value!r}")
    return number
