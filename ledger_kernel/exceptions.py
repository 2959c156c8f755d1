"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

A statement is either correct or it is not shown.  Callers (the request
controller, the CLI, an API layer) must decide what to do with a failure
without parsing message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example - WRONG way to handle errors:
    try:
        statement = service.compute(request)
    except Exception as e:
        if "not found" in str(e):  # FRAGILE - message might change
            show_missing_party()

Example - RIGHT way (what this module enables):
    try:
        statement = service.compute(request)
    except PartyNotFoundError as e:   # Typed catch
        show_missing_party(e.party_id)  # Structured data
    except DataAccessError:
        offer_retry()                   # Whole request is retryable

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from LedgerKernelError:

    LedgerKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidDateRangeError
    |
    +-- NotFoundError
    |   +-- PartyNotFoundError
    |
    +-- DataAccessError
    |
    +-- InvariantViolationError
    |   +-- ClosingBalanceMismatchError
    |   +-- MalformedLedgerError
    |
    +-- MovementError
    |   +-- UnclassifiedMovementKindError
    |   +-- InvalidMovementAmountError
    |
    +-- StatementCancelledError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | INVALID_DATE_RANGE          | date_from > date_to (before any I/O)
----------------|-----------------------------|-----------------------------------------
Not found       | PARTY_NOT_FOUND             | Party does not exist in the firm
----------------|-----------------------------|-----------------------------------------
Data access     | DATA_ACCESS_ERROR           | Backing store failed during a read
----------------|-----------------------------|-----------------------------------------
Invariant       | CLOSING_BALANCE_MISMATCH    | opening + debit - credit != closing
                | MALFORMED_LEDGER            | Opening entry missing or misplaced
----------------|-----------------------------|-----------------------------------------
Movement        | UNCLASSIFIED_MOVEMENT_KIND  | Kind has no debit/credit classification
                | INVALID_MOVEMENT_AMOUNT     | Amount is not a positive Decimal
----------------|-----------------------------|-----------------------------------------
Cancellation    | STATEMENT_CANCELLED         | Superseded request stopped early

===============================================================================
HANDLING PATTERNS
===============================================================================

1. VALIDATION AND NOT-FOUND ERRORS are surfaced, never retried.

2. DATA ACCESS ERRORS are recoverable: retry the WHOLE statement, never a
   single stage.  The original driver exception is chained (__cause__).

3. INVARIANT VIOLATIONS are programming defects.  They are logged with the
   full ledger and must be treated as a hard failure:

    except InvariantViolationError:
        alert_engineering()
        show_error()  # never show the statement

4. STATEMENT CANCELLED is internal to the request controller; a cancelled
   request has already been superseded and its outcome is discarded.

===============================================================================
"""

from datetime import date


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Validation exceptions


class ValidationError(LedgerKernelError):
    """Base exception for malformed statement input."""

    code: str = "VALIDATION_ERROR"


class InvalidDateRangeError(ValidationError):
    """Statement start date is after its end date."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, date_from: date, date_to: date):
        self.date_from = date_from
        self.date_to = date_to
        super().__init__(
            f"Invalid date range: {date_from.isoformat()} is after {date_to.isoformat()}"
        )


# Lookup exceptions


class NotFoundError(LedgerKernelError):
    """Base exception for missing referenced records."""

    code: str = "NOT_FOUND"


class PartyNotFoundError(NotFoundError):
    """Party does not exist in the given firm."""

    code: str = "PARTY_NOT_FOUND"

    def __init__(self, party_id: str, firm_id: str | None = None):
        self.party_id = party_id
        self.firm_id = firm_id
        if firm_id is None:
            super().__init__(f"Party not found: {party_id}")
        else:
            super().__init__(f"Party not found: {party_id} (firm {firm_id})")


# Backing store exceptions


class DataAccessError(LedgerKernelError):
    """
    Backing store failed while reading statement inputs.

    Recoverable: the caller may retry the whole statement computation.
    """

    code: str = "DATA_ACCESS_ERROR"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Data access failed during {operation}: {detail}")


# Invariant exceptions


class InvariantViolationError(LedgerKernelError):
    """Base exception for internal consistency failures (programming defects)."""

    code: str = "INVARIANT_VIOLATION"


class ClosingBalanceMismatchError(InvariantViolationError):
    """
    Independently derived closing balance disagrees with the running balance.

    Raised when opening + total_debit - total_credit != last entry balance.
    """

    code: str = "CLOSING_BALANCE_MISMATCH"

    def __init__(
        self,
        opening_balance: str,
        total_debit: str,
        total_credit: str,
        expected_closing: str,
        running_closing: str,
    ):
        self.opening_balance = opening_balance
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.expected_closing = expected_closing
        self.running_closing = running_closing
        super().__init__(
            f"Closing balance mismatch: opening={opening_balance} "
            f"+ debit={total_debit} - credit={total_credit} = {expected_closing}, "
            f"running balance={running_closing}"
        )


class MalformedLedgerError(InvariantViolationError):
    """Ledger entries do not start with exactly one opening entry."""

    code: str = "MALFORMED_LEDGER"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed ledger: {reason}")


# Movement exceptions


class MovementError(LedgerKernelError):
    """Base exception for movement records that cannot enter a statement."""

    code: str = "MOVEMENT_ERROR"


class UnclassifiedMovementKindError(MovementError):
    """Movement kind has no explicit debit/credit classification."""

    code: str = "UNCLASSIFIED_MOVEMENT_KIND"

    def __init__(self, kind: str, movement_id: str | None = None):
        self.kind = kind
        self.movement_id = movement_id
        super().__init__(
            f"Movement kind '{kind}' has no debit/credit classification"
            + (f" (movement {movement_id})" if movement_id else "")
        )


class InvalidMovementAmountError(MovementError):
    """Movement amount is not a positive Decimal magnitude."""

    code: str = "INVALID_MOVEMENT_AMOUNT"

    def __init__(self, movement_id: str, amount: str):
        self.movement_id = movement_id
        self.amount = amount
        super().__init__(
            f"Movement {movement_id} has invalid amount {amount}: "
            "amounts must be positive"
        )


# Request lifecycle exceptions


class StatementCancelledError(LedgerKernelError):
    """Statement computation stopped because its request was superseded."""

    code: str = "STATEMENT_CANCELLED"

    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"Statement computation cancelled before {stage}")
