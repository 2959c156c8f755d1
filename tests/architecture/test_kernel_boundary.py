"""
Kernel Boundary & Invariants Contract.

Tests that enforce the kernel's architectural boundaries:

1. ledger_kernel/** may NOT import ledger_config or scripts. The kernel
   never depends upward.

2. ledger_kernel/domain/** is the pure core: no ORM, engine, selector or
   service imports.  db.types (Decimal coercion) is the one allowed
   db module.

3. Selectors never write through their session.

4. The statement invariants declaration is complete and non-empty.

These tests read source code via AST -- they cannot break anything.
"""

import ast
import glob
from pathlib import Path

from ledger_kernel.invariants import (
    ALL_STATEMENT_INVARIANTS,
    FORBIDDEN_KERNEL_IMPORTS,
    StatementInvariant,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _python_files(root: str) -> list[str]:
    """Return all .py files under root, relative to cwd."""
    return sorted(glob.glob(f"{root}/**/*.py", recursive=True))


def _parse(filepath: str) -> ast.AST:
    return ast.parse(Path(filepath).read_text(), filename=filepath)


def _extract_imports(filepath: str) -> list[tuple[int, str]]:
    """Extract (line_number, module_string) for all imports in a file."""
    results: list[tuple[int, str]] = []
    for node in ast.walk(_parse(filepath)):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _matches(module: str, prefixes: tuple[str, ...]) -> bool:
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


# ---------------------------------------------------------------------------
# Test: Kernel has no upward dependencies
# ---------------------------------------------------------------------------

class TestKernelNoUpwardDependencies:
    """ledger_kernel/** must not import ledger_config or scripts."""

    def test_kernel_files_found(self):
        assert _python_files("ledger_kernel"), "run pytest from the project root"

    def test_kernel_does_not_import_forbidden_packages(self):
        violations: list[str] = []

        for filepath in _python_files("ledger_kernel"):
            for lineno, module in _extract_imports(filepath):
                if _matches(module, FORBIDDEN_KERNEL_IMPORTS):
                    violations.append(f"  {filepath}:{lineno} imports '{module}'")

        assert not violations, (
            "Kernel boundary violation: ledger_kernel/** must not import "
            "upward packages:\n" + "\n".join(violations)
        )


# ---------------------------------------------------------------------------
# Test: Domain purity
# ---------------------------------------------------------------------------

class TestKernelDomainPurity:
    """ledger_kernel/domain/** must not import ORM, DB session or outer layers."""

    FORBIDDEN_MODULES = (
        "sqlalchemy",
        "psycopg2",
        "sqlite3",
        "yaml",
        "asyncio",
        "ledger_kernel.db.engine",
        "ledger_kernel.db.base",
        "ledger_kernel.models",
        "ledger_kernel.selectors",
        "ledger_kernel.services",
    )

    def test_domain_no_orm_imports(self):
        violations: list[str] = []

        for filepath in _python_files("ledger_kernel/domain"):
            for lineno, module in _extract_imports(filepath):
                if _matches(module, self.FORBIDDEN_MODULES):
                    violations.append(f"  {filepath}:{lineno} imports '{module}'")

        assert not violations, (
            "Domain purity violation: ledger_kernel/domain/** must not "
            "import ORM/DB or outer packages:\n" + "\n".join(violations)
        )


# ---------------------------------------------------------------------------
# Test: Selectors are read-only
# ---------------------------------------------------------------------------

class TestSelectorsReadOnly:
    """Selectors and the SQL store never mutate through their session."""

    WRITE_METHODS = {"add", "add_all", "delete", "commit", "flush", "merge"}

    def test_no_session_writes(self):
        violations: list[str] = []

        for filepath in _python_files("ledger_kernel/selectors"):
            for node in ast.walk(_parse(filepath)):
                if (
                    isinstance(node, ast.Call)
                    and isinstance(node.func, ast.Attribute)
                    and node.func.attr in self.WRITE_METHODS
                    and isinstance(node.func.value, ast.Attribute)
                    and node.func.value.attr == "session"
                ):
                    violations.append(
                        f"  {filepath}:{node.lineno} calls session.{node.func.attr}()"
                    )

        assert not violations, (
            "Selector write violation:\n" + "\n".join(violations)
        )


# ---------------------------------------------------------------------------
# Test: Invariants declaration exists and is complete
# ---------------------------------------------------------------------------

class TestStatementInvariantsDeclaration:
    """The statement invariants contract must be declared and complete."""

    def test_invariants_declared(self):
        assert len(ALL_STATEMENT_INVARIANTS) > 0
        assert ALL_STATEMENT_INVARIANTS == frozenset(StatementInvariant)

    def test_required_invariants_declared(self):
        required = {
            "CLOSING_BALANCE",
            "OPENING_ENTRY_FIRST",
            "CHRONOLOGICAL_ORDER",
            "DECIMAL_ONLY",
            "EXPLICIT_CLASSIFICATION",
            "LATEST_REQUEST_WINS",
        }
        declared = {inv.name for inv in StatementInvariant}
        missing = required - declared
        assert not missing, f"Missing statement invariants: {missing}"

    def test_forbidden_imports_declared(self):
        for pkg in ("ledger_config", "scripts"):
            assert pkg in FORBIDDEN_KERNEL_IMPORTS, (
                f"'{pkg}' not in FORBIDDEN_KERNEL_IMPORTS"
            )
