"""
Config -> Kernel Bridges.

Functions that convert a StatementConfig into kernel-compatible inputs.
These live in ledger_config (the producer) because the kernel must NEVER
import ledger_config.

Usage:
    from ledger_config import get_active_config
    from ledger_config.bridges import build_statement_service

    config = get_active_config()
    with read_only_session_scope() as session:
        service = build_statement_service(config, SqlTransactionStore(session))
"""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from ledger_config.schema import StatementConfig
from ledger_kernel.domain.classification import (
    KindRule,
    MovementClassifier,
    MovementSide,
    OpeningBalanceSource,
)
from ledger_kernel.domain.store import TransactionStore
from ledger_kernel.services.statement_controller import SessionStatementLoader
from ledger_kernel.services.statement_service import StatementService


def build_classifier(config: StatementConfig) -> MovementClassifier:
    """Build a MovementClassifier from the configured movement kinds."""
    rules = [
        KindRule(
            kind=k.kind,
            side=MovementSide(k.side),
            label=k.label,
            reference_field=k.reference_field,
            missing_reference=k.missing_reference,
            include_notes=k.include_notes,
        )
        for k in config.movement_kinds
    ]
    return MovementClassifier(rules, opening_kind=config.opening_kind)


def build_opening_balance_source(config: StatementConfig) -> OpeningBalanceSource:
    return OpeningBalanceSource(config.opening_balance_source)


def build_statement_service(
    config: StatementConfig, store: TransactionStore
) -> StatementService:
    """StatementService over ``store`` with the configured rules."""
    return StatementService(
        store,
        classifier=build_classifier(config),
        source=build_opening_balance_source(config),
        opening_label=config.opening_label,
    )


def build_statement_loader(
    config: StatementConfig,
    session_factory: sessionmaker[Session] | None = None,
) -> SessionStatementLoader:
    """Async loader for StatementRequestController with the configured rules."""
    return SessionStatementLoader(
        session_factory,
        classifier=build_classifier(config),
        source=build_opening_balance_source(config),
        opening_label=config.opening_label,
    )
