"""
TokenCraft Ledger Package

Provides the role-gated fungible token ledger:
- roles / pause / balances: the state components
- token: the operation dispatcher (mint, burn, transfer, transfer-fixed, ...)
- events: append-only log of committed transitions
- ledger_integrity, token_view: read-only reporting
- call_loader: replaying calls from JSON / JSON-lines files
"""

from ledger.errors import ErrorCode, LedgerError, TxResult
from ledger.roles import Role
from ledger.token import TokenLedger, TokenMetadata

__all__ = [
    "ErrorCode",
    "LedgerError",
    "Role",
    "TokenLedger",
    "TokenMetadata",
    "TxResult",
]
