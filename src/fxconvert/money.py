"""Money / rounding helpers."""

from decimal import ROUND_HALF_UP, Decimal, localcontext

CENT = Decimal("0.01")


def round2(value: float) -> float:
    """Round to 2 decimals, halves away from zero (1.235 -> 1.24, -2.565 -> -2.57)."""
    amount = Decimal(str(value))
    with localcontext() as ctx:
        # integer digits plus two decimals must fit the context precision
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))
