from decimal import ROUND_HALF_UP, Decimal

INR_SYMBOL = "₹"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_currency(amount: float, decimals: int = 2) -> str:
    """
    Render ``amount`` as rupees, e.g. ``format_currency(1234.5) == "₹1234.50"``.
    Rounds half-up on the exact binary value of the float.
    """
    quantum = Decimal(1).scaleb(-decimals)
    value = Decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{INR_SYMBOL}{value:f}"
