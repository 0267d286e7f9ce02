"""
TokenCraft token ledger (operation dispatcher)

Role-gated fungible token:
- owner manages minter/burner grants and the pause flag
- minters create units for any recipient
- burners destroy units from their own balance
- any holder moves its own units (blocked while paused)

Every entry point takes the authenticated caller first and runs as
validate-then-commit: all preconditions are checked before any state is
touched, so a failed call leaves balances, supply, roles, the pause flag and
the event log exactly as they were. Failures come back as TxResult errors,
never as exceptions.

Precondition order (deterministic error reporting):
    authorization -> pause -> amount -> balance
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional
import logging

from ledger.balances import BalanceLedger, BalanceSnapshot, require_amount
from ledger.errors import ErrorCode, LedgerError, TxResult
from ledger.events import EventLog
from ledger.pause import PauseSwitch
from ledger.roles import Role, RoleRegistry

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenMetadata:
    name: str = "TokenCraft"
    symbol: str = "TCRAFT"
    decimals: int = 8


def _transaction(fn: Callable[..., TxResult]) -> Callable[..., TxResult]:
    @wraps(fn)
    def wrapper(self: "TokenLedger", caller: str, *args, **kwargs) -> TxResult:
        try:
            return fn(self, caller, *args, **kwargs)
        except LedgerError as e:
            log.debug("[TokenLedger] %s by %s rejected: %s", fn.__name__, caller, e)
            return TxResult.failure(e.code)

    return wrapper


class TokenLedger:
    def __init__(self, owner: str, metadata: Optional[TokenMetadata] = None) -> None:
        self.metadata = metadata or TokenMetadata()
        self.roles = RoleRegistry(owner)
        self.pause = PauseSwitch()
        self.balances = BalanceLedger()
        self.events = EventLog()

    @property
    def owner(self) -> str:
        return self.roles.owner

    # ------------------------------------------------------------------ #
    # Guards
    # ------------------------------------------------------------------ #
    def _require_owner(self, caller: str) -> None:
        if not self.roles.is_owner(caller):
            raise LedgerError(ErrorCode.UNAUTHORIZED, f"{caller} is not the owner")

    def _require_role(self, role: Role, caller: str) -> None:
        if not self.roles.has_role(role, caller):
            raise LedgerError(ErrorCode.UNAUTHORIZED, f"{caller} lacks {role.value} role")

    def _require_not_paused(self) -> None:
        if self.pause.is_paused():
            raise LedgerError(ErrorCode.CONTRACT_PAUSED)

    # ------------------------------------------------------------------ #
    # Owner operations
    # ------------------------------------------------------------------ #
    @_transaction
    def set_role(self, caller: str, role: Role, identity: str, granted: bool) -> TxResult:
        if not isinstance(role, Role):
            raise TypeError(f"role must be a Role, got {role!r}")
        self._require_owner(caller)

        self.roles.set_grant(role, identity, granted)
        self.events.record("set-role", caller, role=role.value, identity=identity, granted=bool(granted))
        log.info("[TokenLedger] set-role %s %s=%s", role.value, identity, bool(granted))
        return TxResult.success(True)

    @_transaction
    def set_pause_status(self, caller: str, paused: bool) -> TxResult:
        self._require_owner(caller)

        self.pause.set(paused)
        self.events.record("set-pause-status", caller, paused=bool(paused))
        log.info("[TokenLedger] set-pause-status paused=%s", bool(paused))
        return TxResult.success(True)

    # ------------------------------------------------------------------ #
    # Supply operations (not pause-gated)
    # ------------------------------------------------------------------ #
    @_transaction
    def mint(self, caller: str, amount: int, recipient: str) -> TxResult:
        self._require_role(Role.MINTER, caller)
        require_amount(amount)
        self.balances.require_mintable(amount)

        self.balances.credit(recipient, amount)
        self.events.record("mint", caller, recipient=recipient, amount=amount)
        log.info("[TokenLedger] mint %s -> %s", amount, recipient)
        return TxResult.success(True)

    @_transaction
    def burn(self, caller: str, amount: int) -> TxResult:
        self._require_role(Role.BURNER, caller)
        require_amount(amount)
        self.balances.require_funds(caller, amount)

        self.balances.debit(caller, amount)
        self.balances.retire(amount)
        self.events.record("burn", caller, amount=amount)
        log.info("[TokenLedger] burn %s from %s", amount, caller)
        return TxResult.success(True)

    # ------------------------------------------------------------------ #
    # Transfers (pause-gated)
    # ------------------------------------------------------------------ #
    @_transaction
    def transfer(self, caller: str, amount: int, recipient: str) -> TxResult:
        self._require_not_paused()
        require_amount(amount)
        self.balances.require_funds(caller, amount)

        self.balances.move(caller, recipient, amount)
        self.events.record("transfer", caller, sender=caller, recipient=recipient, amount=amount)
        log.info("[TokenLedger] transfer %s %s -> %s", amount, caller, recipient)
        return TxResult.success(True)

    @_transaction
    def transfer_fixed(
        self,
        caller: str,
        amount: int,
        sender: str,
        recipient: str,
        memo: Optional[bytes] = None,
    ) -> TxResult:
        """
        SIP-010 style transfer. `sender` must be the authenticated caller;
        `memo` is opaque and only lands in the event log.
        """
        if memo is not None and not isinstance(memo, (bytes, bytearray)):
            raise TypeError(f"memo must be bytes or None, got {type(memo).__name__}")
        if sender != caller:
            raise LedgerError(ErrorCode.UNAUTHORIZED, f"sender {sender} is not caller {caller}")
        self._require_not_paused()
        require_amount(amount)
        self.balances.require_funds(sender, amount)

        self.balances.move(sender, recipient, amount)
        self.events.record(
            "transfer",
            caller,
            sender=sender,
            recipient=recipient,
            amount=amount,
            memo=bytes(memo).hex() if memo is not None else None,
        )
        log.info("[TokenLedger] transfer-fixed %s %s -> %s", amount, sender, recipient)
        return TxResult.success(True)

    # ------------------------------------------------------------------ #
    # Read-only
    # ------------------------------------------------------------------ #
    def get_name(self) -> str:
        return self.metadata.name

    def get_symbol(self) -> str:
        return self.metadata.symbol

    def get_decimals(self) -> int:
        return self.metadata.decimals

    def get_balance(self, identity: str) -> int:
        return self.balances.balance_of(identity)

    def get_total_supply(self) -> int:
        return self.balances.total_supply()

    def is_paused(self) -> bool:
        return self.pause.is_paused()

    def has_role(self, role: Role, identity: str) -> bool:
        return self.roles.has_role(role, identity)

    def snapshot(self) -> BalanceSnapshot:
        return self.balances.snapshot()
