"""
Module: ledger_kernel.db.types
Responsibility: Decimal coercion for monetary values.  Column precision
    lives in Base.type_annotation_map; this module makes sure every DTO and
    service handles amounts the same way.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    CRITICAL: No floats anywhere in the ledger kernel.  All monetary amounts
           use Decimal with explicit precision.  to_money() rejects float
           input outright instead of converting it.

Failure modes:
    - TypeError when a float (or other non-numeric type) is passed to to_money().
    - decimal.InvalidOperation on a non-numeric string.
"""

from decimal import Decimal

ZERO = Decimal("0")


def to_money(value: Decimal | int | str | None) -> Decimal:
    """
    Coerce a monetary value to Decimal.

    Preconditions: value is a Decimal, int, numeric string, or None.
    Postconditions: Returns a Decimal (None becomes zero).  The value is
        not rounded; storage precision is applied by the Numeric column.

    Raises:
        TypeError: If value is a float or any other unsupported type.
        decimal.InvalidOperation: If a string is not numeric.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(
            f"Monetary values must be Decimal, int or str, got {type(value).__name__}"
        )
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, str)):
        return Decimal(value)
    raise TypeError(
        f"Monetary values must be Decimal, int or str, got {type(value).__name__}"
    )
