"""Integer-cents money helpers."""

from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going towards +infinity.

    Matches the browser's ``Math.round`` (``-2.5 -> -2``, ``2.5 -> 3``) so
    figures computed here agree with the ones the dashboard shows. The
    built-in ``round`` uses banker's rounding. Values go through their
    shortest decimal repr, so ``1.005`` rounds to ``1.01``.
    """
    amount = Decimal(str(value))
    # Halves of negative numbers move towards zero
    rounding = ROUND_HALF_UP if amount >= 0 else ROUND_HALF_DOWN
    return float(amount.quantize(Decimal(1).scaleb(-ndigits), rounding=rounding))


def round_cents(value: float) -> int:
    """Round a fractional cents amount to an integer, half-up."""
    return int(round_half_up(value))


def format_cents(cents: int, symbol: str = "$", code: str = "") -> str:
    """Format integer cents for display, e.g. ``$1,234.50`` or ``CA$12.00``."""
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    return f"{sign}{code}{symbol}{whole:,}.{frac:02d}"
