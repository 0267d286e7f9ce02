"""
Balance Ledger

Maps identity -> non-negative integer unit count and keeps the running total
supply. Entries are implicitly zero until first credited.

Invariant (checked by ledger_integrity): total_supply == sum(balances) and no
balance is ever negative.

Only the dispatcher in ledger.token calls the mutating methods here.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List

from ledger.errors import ErrorCode, LedgerError

# Unsigned 128-bit unit range.
MAX_UINT = 2**128 - 1


def require_amount(amount: int) -> int:
    # bool is an int subclass; True must not read as "1 unit"
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise LedgerError(ErrorCode.INVALID_AMOUNT, f"amount must be an integer, got {amount!r}")
    if amount <= 0 or amount > MAX_UINT:
        raise LedgerError(ErrorCode.INVALID_AMOUNT, f"amount out of range: {amount}")
    return amount


@dataclass
class BalanceSnapshot:
    balances: Dict[str, int] = field(default_factory=dict)
    total_supply: int = 0

    def sum_balances(self) -> int:
        return sum(self.balances.values())


class BalanceLedger:
    def __init__(self) -> None:
        self._balances: Dict[str, int] = {}
        self._total_supply = 0

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def balance_of(self, identity: str) -> int:
        return self._balances.get(identity, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def holders(self) -> List[str]:
        return sorted(ident for ident, amt in self._balances.items() if amt > 0)

    def snapshot(self) -> BalanceSnapshot:
        return BalanceSnapshot(balances=dict(self._balances), total_supply=self._total_supply)

    # ------------------------------------------------------------------ #
    # Validation (no mutation)
    # ------------------------------------------------------------------ #
    def require_funds(self, identity: str, amount: int) -> None:
        have = self.balance_of(identity)
        if have < amount:
            raise LedgerError(
                ErrorCode.INSUFFICIENT_BALANCE,
                f"{identity} holds {have}, needs {amount}",
            )

    def require_mintable(self, amount: int) -> None:
        if self._total_supply + amount > MAX_UINT:
            raise LedgerError(ErrorCode.INVALID_AMOUNT, "total supply would overflow")

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #
    def credit(self, identity: str, amount: int) -> None:
        """Create `amount` new units for `identity` (balance and supply)."""
        require_amount(amount)
        self.require_mintable(amount)
        self._balances[identity] = self.balance_of(identity) + amount
        self._total_supply += amount

    def debit(self, identity: str, amount: int) -> None:
        """
        Remove `amount` from `identity`'s balance. Supply is left to the caller
        (retire() for burns, move() for transfers). Fails without mutation.
        """
        require_amount(amount)
        self.require_funds(identity, amount)
        self._balances[identity] = self.balance_of(identity) - amount

    def retire(self, amount: int) -> None:
        if amount > self._total_supply:
            raise LedgerError(ErrorCode.INSUFFICIENT_BALANCE, "retire exceeds total supply")
        self._total_supply -= amount

    def move(self, sender: str, recipient: str, amount: int) -> None:
        self.debit(sender, amount)
        self._balances[recipient] = self.balance_of(recipient) + amount
