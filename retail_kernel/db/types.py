"""
Module: retail_kernel.db.types
Responsibility: The single conversion point from caller-supplied numbers to
    Decimal money values.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

CRITICAL: No floats anywhere in the kernel.  Prices, costs, discounts and
    profit are Decimal end to end.
"""

from decimal import Decimal, InvalidOperation


def to_money(value: Decimal | int | str) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal.

    Floats are rejected; integers and numeric strings are accepted.

    Raises:
        ValueError: If the value is a float or not a finite number.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"Monetary amounts must not be float or bool: {value!r}")
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation as exc:
            raise ValueError(f"Not a numeric amount: {value!r}") from exc
    else:
        raise ValueError(f"Unsupported amount type: {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return result
