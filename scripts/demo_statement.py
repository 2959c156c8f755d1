#!/usr/bin/env python3
"""
Demo: Party Statement.

Seeds an in-memory SQLite database with one firm, one customer and a few
movements, then prints the customer's statement for January 2024:
opening balance 1000, a sale of 500 and a collection of 300.

Nothing is written outside the process.

Usage:
    python3 scripts/demo_statement.py
    python3 scripts/demo_statement.py --json
"""

import argparse
import json
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DB_URL = "sqlite:///:memory:"
DATE_FROM = date(2024, 1, 1)
DATE_TO = date(2024, 1, 31)

W = 88  # total line width


def _fmt(amount: Decimal) -> str:
    if not amount:
        return ""
    return f"{amount:,.2f}"


def _print_statement(statement) -> None:
    s = statement.summary
    print()
    print("=" * W)
    print(f"Statement of account: {statement.party.name}".center(W))
    print(f"{s.date_from.isoformat()} to {s.date_to.isoformat()}".center(W))
    print("=" * W)
    print(f"  {'Date':<12}{'Description':<38}{'Debit':>12}{'Credit':>12}{'Balance':>12}")
    print("  " + "-" * (W - 2))
    for e in statement.entries:
        print(
            f"  {e.date.isoformat():<12}{e.description[:36]:<38}"
            f"{_fmt(e.debit):>12}{_fmt(e.credit):>12}{e.balance:>12,.2f}"
        )
    print("  " + "-" * (W - 2))
    print(f"  {'Opening balance':<50}{s.opening_balance:>36,.2f}")
    print(f"  {'Total debit':<50}{s.total_debit:>36,.2f}")
    print(f"  {'Total credit':<50}{s.total_credit:>36,.2f}")
    print(f"  {'Closing balance':<50}{s.closing_balance:>36,.2f}")
    print()


def _seed(session, actor_id):
    from ledger_kernel.models import Firm, MovementModel, Party, PartyType

    firm = Firm(name="Demo Traders", created_by_id=actor_id)
    session.add(firm)
    session.flush()

    party = Party(
        firm_id=firm.id,
        name="Acme Retail",
        party_type=PartyType.CUSTOMER.value,
        opening_balance=Decimal("1000.00"),
        created_by_id=actor_id,
    )
    session.add(party)
    session.flush()

    rows = [
        ("sale", "500.00", date(2024, 1, 2), "approved", {"bill_number": "INV-001"}),
        ("collection", "300.00", date(2024, 1, 5), "approved", {"payment_method": "cash"}),
        # Never on a statement: pending and rejected rows.
        ("sale", "999.00", date(2024, 1, 6), "pending", {"bill_number": "INV-002"}),
        ("collection", "50.00", date(2024, 1, 7), "rejected", {"payment_method": "upi"}),
    ]
    for kind, amount, on, status, extra in rows:
        session.add(
            MovementModel(
                firm_id=firm.id,
                party_id=party.id,
                kind=kind,
                amount=Decimal(amount),
                status=status,
                transaction_date=on,
                created_by_id=actor_id,
                **extra,
            )
        )
    return firm.id, party.id


def main() -> int:
    parser = argparse.ArgumentParser(description="Print a demo party statement")
    parser.add_argument("--json", action="store_true", help="Print the statement as JSON")
    args = parser.parse_args()

    from ledger_config import get_active_config
    from ledger_config.bridges import build_statement_service
    from ledger_kernel.db.engine import (
        create_tables,
        init_engine_from_url,
        read_only_session_scope,
        reset_engine,
        session_scope,
    )
    from ledger_kernel.domain.statement import StatementRequest
    from ledger_kernel.selectors.store import SqlTransactionStore

    init_engine_from_url(DB_URL)
    create_tables()
    try:
        with session_scope() as session:
            firm_id, party_id = _seed(session, uuid4())

        config = get_active_config()
        with read_only_session_scope() as session:
            service = build_statement_service(config, SqlTransactionStore(session))
            statement = service.compute(
                StatementRequest(firm_id, party_id, DATE_FROM, DATE_TO)
            )
    finally:
        reset_engine()

    if args.json:
        print(json.dumps(statement.to_dict(), indent=2))
    else:
        _print_statement(statement)
    return 0


if __name__ == "__main__":
    sys.exit(main())
