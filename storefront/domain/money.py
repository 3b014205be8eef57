# storefront/domain/money.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")


def parse_money(value) -> Decimal:
    """Parse a price given as str/int/float into a Decimal with two places.

    Raises ValueError for anything that is not a finite, non-negative number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid price: {value!r}")
    try:
        # float przez str, zeby nie ciagnac bledu binarnej reprezentacji
        amount = Decimal(str(value).strip())
    except (InvalidOperation, TypeError):
        raise ValueError(f"Invalid price: {value!r}")
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Invalid price: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    return str(amount.quantize(CENT, rounding=ROUND_HALF_UP))
