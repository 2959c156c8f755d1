"""
Ledger Kernel - party account statements

Reconstructs a single party's running-balance statement from the raw
transaction log:
- Opening balance brought forward from stored or synthetic sources
- Deterministic, approved-only movement selection
- Decimal running-balance fold with a closing-balance cross-check
- Stale-result discard for overlapping statement requests
"""

__version__ = "0.1.0"
