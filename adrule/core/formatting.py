"""ADRULE — Number & Currency Formatting.

Reproduces what the dashboard shows for numbers: JavaScript ``Number()``
parsing rules and ``toLocaleString('id-ID')`` output, with every comma
rewritten to a period for Rupiah amounts. Output never depends on the host
locale.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Optional

CURRENCY_PREFIX = "Rp "

_DECIMAL_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
_PREFIXED_INT_RE = re.compile(r"^0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
_FRACTION_QUANTUM = Decimal("0.001")  # id-ID keeps at most 3 fraction digits


def parse_number(raw: Any) -> Optional[float]:
    """Parse ``raw`` the way JavaScript ``Number()`` would.

    Blank strings parse as 0. Returns None where JavaScript would produce
    NaN, and also for non-finite results.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None

    text = str(raw).strip()
    if not text:
        return 0.0
    if _DECIMAL_RE.match(text):
        value = float(text)
        return value if math.isfinite(value) else None
    if _PREFIXED_INT_RE.match(text):
        return float(int(text, 0))
    return None


def format_id_number(number: float) -> str:
    """Format ``number`` with ``id-ID`` conventions: ``1.234.567,891``."""
    with localcontext() as ctx:
        ctx.prec = 400
        quantized = Decimal(repr(float(number))).quantize(
            _FRACTION_QUANTUM, rounding=ROUND_HALF_UP
        )
    sign = "-" if quantized < 0 else ""
    integer, _, fraction = f"{abs(quantized):f}".partition(".")
    fraction = fraction.rstrip("0")

    grouped = f"{int(integer):,}".replace(",", ".")
    if fraction:
        return f"{sign}{grouped},{fraction}"
    return f"{sign}{grouped}"


def format_rupiah(number: float) -> str:
    """``Rp `` + id-ID number with every separator rendered as a period."""
    return CURRENCY_PREFIX + format_id_number(number).replace(",", ".")


def format_condition_value(raw: Any, threshold: float) -> str:
    """Render a condition threshold value.

    Numeric values at or above ``threshold`` are shown as Rupiah whatever the
    metric's real unit; everything else is shown exactly as entered.
    """
    number = parse_number(raw)
    if number is not None and number >= threshold:
        return format_rupiah(number)
    return "" if raw is None else str(raw)


def strip_grouping(amount: Any) -> str:
    """Remove ``.`` thousands separators from an amount string."""
    return "" if amount is None else str(amount).replace(".", "")


def format_amount(amount: Any) -> str:
    """Render a budget amount as Rupiah.

    The amount may already carry ``.`` separators from a previous display
    step, so ``"1.500.000"`` and ``"1500000"`` render identically.
    """
    cleaned = strip_grouping(amount)
    number = parse_number(cleaned)
    if number is None:
        return CURRENCY_PREFIX + cleaned
    return format_rupiah(number)


def format_percentage(percentage: Any) -> str:
    """``20`` → ``20%``; integral floats drop their ``.0``."""
    if isinstance(percentage, float) and percentage.is_integer():
        percentage = int(percentage)
    return f"{percentage}%"


def format_interval(seconds: int) -> str:
    """Human label for an interval: ``15 menit``, ``10 menit 30 detik``, ``45 detik``."""
    if seconds >= 60:
        minutes, remaining = divmod(seconds, 60)
        if remaining == 0:
            return f"{minutes} menit"
        return f"{minutes} menit {remaining} detik"
    return f"{seconds} detik"
