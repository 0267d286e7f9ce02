"""
TokenCraft ledger errors

Stable numeric error codes returned by every state-changing operation.
External callers branch on these numbers, so they never change once published:

- 1001 Unauthorized         caller lacks owner identity or required role
- 1002 InsufficientBalance  a debit would drive a balance negative
- 1003 InvalidAmount        amount is zero / negative / out of range
- 1004 ContractPaused       transfer-class call while the pause flag is set

Inside the ledger a failed precondition raises LedgerError; the dispatcher
turns it into a TxResult at the operation boundary.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional


class ErrorCode(IntEnum):
    UNAUTHORIZED = 1001
    INSUFFICIENT_BALANCE = 1002
    INVALID_AMOUNT = 1003
    CONTRACT_PAUSED = 1004

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ErrorCode.UNAUTHORIZED: "Unauthorized",
    ErrorCode.INSUFFICIENT_BALANCE: "InsufficientBalance",
    ErrorCode.INVALID_AMOUNT: "InvalidAmount",
    ErrorCode.CONTRACT_PAUSED: "ContractPaused",
}


class LedgerError(Exception):
    """Raised by a precondition check; never escapes the dispatcher."""

    def __init__(self, code: ErrorCode, detail: str = "") -> None:
        self.code = ErrorCode(code)
        self.detail = detail
        super().__init__(f"{self.code.label} ({int(self.code)}){': ' + detail if detail else ''}")


class UnexpectedResult(AssertionError):
    pass


@dataclass(frozen=True)
class TxResult:
    value: Any = None
    error: Optional[ErrorCode] = None

    @classmethod
    def success(cls, value: Any = True) -> "TxResult":
        return cls(value=value)

    @classmethod
    def failure(cls, code: ErrorCode) -> "TxResult":
        return cls(error=ErrorCode(code))

    @property
    def ok(self) -> bool:
        return self.error is None

    def expect_ok(self) -> Any:
        if self.error is not None:
            raise UnexpectedResult(f"expected ok, got {self.receipt()}")
        return self.value

    def expect_err(self) -> ErrorCode:
        if self.error is None:
            raise UnexpectedResult(f"expected err, got {self.receipt()}")
        return self.error

    def receipt(self) -> str:
        """
        Short printable form used by the replay CLI:
            ok(true) / err(1002)
        """
        if self.error is not None:
            return f"err({int(self.error)})"
        if isinstance(self.value, bool):
            return f"ok({str(self.value).lower()})"
        return f"ok({self.value})"

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"ok": False, "code": int(self.error), "error": self.error.label}
        return {"ok": True, "result": self.value}
