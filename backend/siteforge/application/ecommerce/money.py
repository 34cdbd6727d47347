from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from siteforge.errors import ValidationError

CENT = Decimal("0.01")


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_money(value, field="amount", *, minimum=Decimal("0")) -> Decimal:
    """Parse client input into a two-decimal amount, rejecting values below ``minimum``."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid {field}: {value}") from exc

    if not amount.is_finite():
        raise ValidationError(f"Invalid {field}: {value}")
    if minimum is not None and amount < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return quantize(amount)
