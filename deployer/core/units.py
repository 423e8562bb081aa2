"""Unit conversions between human-authored figures and on-chain integers."""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from web3 import Web3

from deployer.core.constants import ASSET_KEY_LENGTH, PERCENTAGE_100, PRECISION, WAD
from deployer.core.errors import ConfigError

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Parse a document value into a Decimal.

    Floats go through ``str`` so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, bool):
        raise ConfigError(f"Expected a number, got boolean {value}")
    try:
        parsed = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ConfigError(f"Expected a number, got {value!r}")
    if not parsed.is_finite():
        raise ConfigError(f"Expected a finite number, got {value!r}")
    return parsed


def _scale(value: Number, factor: int) -> int:
    with localcontext() as ctx:
        ctx.prec = 80
        scaled = to_decimal(value) * factor
    if scaled != scaled.to_integral_value():
        raise ConfigError(f"{value} cannot be represented with the on-chain precision")
    return int(scaled)


def to_fixed_point(human_percent: Number) -> int:
    """Convert a human percentage (5 meaning 5%) to the fixed-point representation."""
    return _scale(human_percent, PRECISION)


def to_wei(amount: Number, decimals: int = 18) -> int:
    """Convert a token amount to its smallest unit."""
    return _scale(amount, WAD if decimals == 18 else 10**decimals)


def percent_to_str(value: int, is_col_ratio: bool = False) -> str:
    """Render a fixed-point percentage for logs.

    Collateralization ratios are stored inverted (100% / ratio), matching how
    the asset parameters contract reports them.
    """
    if value == 0:
        return "0%"
    if is_col_ratio:
        ratio = Decimal(100) * Decimal(PERCENTAGE_100) / Decimal(value)
        return f"{ratio.normalize():f}%"
    return f"{value // PRECISION}%"


def asset_key(symbol: str) -> bytes:
    """Derive the bytes32 asset key for a ticker symbol.

    UTF-8 bytes of the symbol right-padded with zeros. The empty symbol maps to
    the all-zero key, which the pools registry reads as "no asset".
    """
    raw = symbol.encode("utf-8")
    if len(raw) > ASSET_KEY_LENGTH:
        raise ConfigError(f"Symbol {symbol!r} does not fit into bytes32")
    return raw.ljust(ASSET_KEY_LENGTH, b"\x00")


def asset_key_hex(symbol: str) -> str:
    """Hex form of the asset key, for logging."""
    return Web3.to_hex(asset_key(symbol))
