"""
Tests for the TokenCraft operation dispatcher (ledger/token.py).

Covers the documented scenarios, the error-precedence rules and the
all-or-nothing guarantee on every failure path.
"""

import pytest

from conftest import DEPLOYER, W1, W2, W3, full_state
from ledger.balances import MAX_UINT
from ledger.errors import ErrorCode
from ledger.roles import Role
from ledger.token import TokenLedger, TokenMetadata


class TestRoleManagement:
    def test_owner_can_set_roles(self, token):
        result = token.set_role(DEPLOYER, Role.MINTER, W1, True)
        assert result.ok
        assert result.value is True
        assert token.has_role(Role.MINTER, W1)

    def test_non_owner_cannot_set_roles(self, token):
        before = full_state(token)
        result = token.set_role(W1, Role.MINTER, W2, True)
        assert result.expect_err() == ErrorCode.UNAUTHORIZED
        assert not token.has_role(Role.MINTER, W2)
        assert full_state(token) == before

    def test_set_role_is_idempotent(self, token):
        token.set_role(DEPLOYER, Role.BURNER, W1, True).expect_ok()
        once = token.roles.snapshot()
        token.set_role(DEPLOYER, Role.BURNER, W1, True).expect_ok()
        assert token.roles.snapshot() == once

    def test_revoke_role(self, token):
        token.set_role(DEPLOYER, Role.MINTER, W1, True).expect_ok()
        token.set_role(DEPLOYER, Role.MINTER, W1, False).expect_ok()
        assert not token.has_role(Role.MINTER, W1)
        assert token.mint(W1, 10, W1).expect_err() == ErrorCode.UNAUTHORIZED

    def test_owner_has_no_implicit_roles(self, token):
        assert token.mint(DEPLOYER, 10, W1).expect_err() == ErrorCode.UNAUTHORIZED

    def test_role_must_be_enum(self, token):
        with pytest.raises(TypeError):
            token.set_role(DEPLOYER, "minter", W1, True)

    def test_has_role_must_be_enum(self, token):
        token.set_role(DEPLOYER, Role.MINTER, W1, True).expect_ok()
        assert token.has_role(Role.MINTER, W1)
        with pytest.raises(TypeError):
            token.has_role("minter", W1)


class TestMint:
    def test_authorized_minter_can_mint(self, token):
        token.set_role(DEPLOYER, Role.MINTER, W1, True).expect_ok()
        assert token.mint(W1, 100, W1).expect_ok() is True
        assert token.get_balance(W1) == 100
        assert token.get_total_supply() == 100

    def test_unauthorized_mint_is_prevented(self, token):
        result = token.mint(W1, 100, W1)
        assert result.expect_err() == ErrorCode.UNAUTHORIZED
        assert token.get_balance(W1) == 0
        assert token.get_total_supply() == 0

    def test_mint_credits_only_recipient(self, funded):
        before = funded.snapshot().balances
        funded.mint(DEPLOYER, 75, W2).expect_ok()
        after = funded.snapshot().balances
        assert after[W2] == before.get(W2, 0) + 75
        assert {k: v for k, v in after.items() if k != W2} == before
        assert funded.get_total_supply() == 275

    @pytest.mark.parametrize("amount", [0, -5])
    def test_mint_rejects_non_positive_amount(self, funded, amount):
        before = full_state(funded)
        assert funded.mint(DEPLOYER, amount, W2).expect_err() == ErrorCode.INVALID_AMOUNT
        assert full_state(funded) == before

    def test_mint_rejects_bool_amount(self, funded):
        assert funded.mint(DEPLOYER, True, W2).expect_err() == ErrorCode.INVALID_AMOUNT

    def test_mint_rejects_supply_overflow(self, funded):
        before = full_state(funded)
        assert funded.mint(DEPLOYER, MAX_UINT, W2).expect_err() == ErrorCode.INVALID_AMOUNT
        assert full_state(funded) == before

    def test_unauthorized_checked_before_amount(self, token):
        assert token.mint(W1, 0, W1).expect_err() == ErrorCode.UNAUTHORIZED

    def test_mint_not_gated_by_pause(self, funded):
        funded.set_pause_status(DEPLOYER, True).expect_ok()
        funded.mint(DEPLOYER, 10, W2).expect_ok()
        assert funded.get_balance(W2) == 10


class TestBurn:
    def test_authorized_burner_can_burn(self, funded):
        funded.set_role(DEPLOYER, Role.BURNER, W1, True).expect_ok()
        assert funded.burn(W1, 50).expect_ok() is True
        assert funded.get_balance(W1) == 150
        assert funded.get_total_supply() == 150

    def test_unauthorized_burn_is_prevented(self, funded):
        before = full_state(funded)
        assert funded.burn(W1, 50).expect_err() == ErrorCode.UNAUTHORIZED
        assert full_state(funded) == before

    def test_burn_more_than_balance_leaves_state(self, funded):
        funded.set_role(DEPLOYER, Role.BURNER, W1, True).expect_ok()
        before = full_state(funded)
        assert funded.burn(W1, 201).expect_err() == ErrorCode.INSUFFICIENT_BALANCE
        assert full_state(funded) == before

    def test_burn_is_self_targeted(self, funded):
        # a burner with no balance cannot destroy anyone else's units
        funded.set_role(DEPLOYER, Role.BURNER, W2, True).expect_ok()
        assert funded.burn(W2, 10).expect_err() == ErrorCode.INSUFFICIENT_BALANCE
        assert funded.get_balance(W1) == 200

    def test_burn_zero_is_invalid_amount(self, funded):
        funded.set_role(DEPLOYER, Role.BURNER, W1, True).expect_ok()
        assert funded.burn(W1, 0).expect_err() == ErrorCode.INVALID_AMOUNT

    def test_precedence_unauthorized_then_amount_then_balance(self, token):
        assert token.burn(W1, 0).expect_err() == ErrorCode.UNAUTHORIZED
        token.set_role(DEPLOYER, Role.BURNER, W1, True).expect_ok()
        assert token.burn(W1, 0).expect_err() == ErrorCode.INVALID_AMOUNT
        assert token.burn(W1, 1).expect_err() == ErrorCode.INSUFFICIENT_BALANCE

    def test_burn_not_gated_by_pause(self, funded):
        funded.set_role(DEPLOYER, Role.BURNER, W1, True).expect_ok()
        funded.set_pause_status(DEPLOYER, True).expect_ok()
        funded.burn(W1, 20).expect_ok()
        assert funded.get_total_supply() == 180


class TestTransfer:
    def test_successful_transfer(self, funded):
        assert funded.transfer(W1, 50, W2).expect_ok() is True
        assert funded.get_balance(W1) == 150
        assert funded.get_balance(W2) == 50
        assert funded.get_total_supply() == 200

    def test_insufficient_balance(self, token):
        before = full_state(token)
        assert token.transfer(W1, 50, W2).expect_err() == ErrorCode.INSUFFICIENT_BALANCE
        assert full_state(token) == before

    def test_transfer_needs_no_role(self, funded):
        assert not funded.has_role(Role.MINTER, W1)
        funded.transfer(W1, 1, W3).expect_ok()

    def test_transfer_entire_balance(self, funded):
        funded.transfer(W1, 200, W2).expect_ok()
        assert funded.get_balance(W1) == 0
        assert funded.get_balance(W2) == 200

    def test_self_transfer_is_net_noop(self, funded):
        funded.transfer(W1, 80, W1).expect_ok()
        assert funded.get_balance(W1) == 200
        assert funded.get_total_supply() == 200

    def test_paused_transfer_fails_even_with_balance(self, funded):
        assert funded.set_pause_status(DEPLOYER, True).expect_ok() is True
        before = full_state(funded)
        assert funded.transfer(W1, 10, W2).expect_err() == ErrorCode.CONTRACT_PAUSED
        assert full_state(funded) == before

    def test_pause_checked_before_balance_and_amount(self, token):
        token.set_pause_status(DEPLOYER, True).expect_ok()
        assert token.transfer(DEPLOYER, 10, W1).expect_err() == ErrorCode.CONTRACT_PAUSED
        assert token.transfer(DEPLOYER, 0, W1).expect_err() == ErrorCode.CONTRACT_PAUSED

    def test_amount_checked_before_balance(self, token):
        assert token.transfer(W1, 0, W2).expect_err() == ErrorCode.INVALID_AMOUNT

    def test_unpause_restores_transfers(self, funded):
        funded.set_pause_status(DEPLOYER, True).expect_ok()
        funded.set_pause_status(DEPLOYER, False).expect_ok()
        funded.transfer(W1, 10, W2).expect_ok()


class TestTransferFixed:
    def test_transfer_fixed_with_memo(self, funded):
        result = funded.transfer_fixed(W1, 50, W1, W2, b"test memo")
        assert result.expect_ok() is True
        assert funded.get_balance(W1) == 150
        assert funded.get_balance(W2) == 50
        ev = funded.events.all_events("transfer")[-1]
        assert ev.payload["memo"] == b"test memo".hex()

    def test_transfer_fixed_without_memo(self, funded):
        funded.transfer_fixed(W1, 5, W1, W2).expect_ok()
        assert funded.events.all_events("transfer")[-1].payload["memo"] is None

    def test_sender_must_be_caller(self, funded):
        before = full_state(funded)
        assert funded.transfer_fixed(W2, 50, W1, W2, None).expect_err() == ErrorCode.UNAUTHORIZED
        assert full_state(funded) == before

    def test_unauthorized_before_pause(self, funded):
        funded.set_pause_status(DEPLOYER, True).expect_ok()
        assert funded.transfer_fixed(W2, 50, W1, W2).expect_err() == ErrorCode.UNAUTHORIZED
        assert funded.transfer_fixed(W1, 50, W1, W2).expect_err() == ErrorCode.CONTRACT_PAUSED

    def test_insufficient_balance(self, funded):
        assert funded.transfer_fixed(W1, 500, W1, W2).expect_err() == ErrorCode.INSUFFICIENT_BALANCE

    def test_zero_amount_is_invalid(self, funded):
        before = full_state(funded)
        assert funded.transfer_fixed(W1, 0, W1, W2).expect_err() == ErrorCode.INVALID_AMOUNT
        assert full_state(funded) == before

    def test_pause_checked_before_balance(self, funded):
        funded.set_pause_status(DEPLOYER, True).expect_ok()
        before = full_state(funded)
        assert funded.transfer_fixed(W1, 500, W1, W2).expect_err() == ErrorCode.CONTRACT_PAUSED
        assert full_state(funded) == before

    def test_memo_must_be_bytes(self, funded):
        with pytest.raises(TypeError):
            funded.transfer_fixed(W1, 5, W1, W2, "text memo")


class TestPause:
    def test_non_owner_cannot_pause(self, token):
        before = full_state(token)
        assert token.set_pause_status(W1, True).expect_err() == ErrorCode.UNAUTHORIZED
        assert not token.is_paused()
        assert full_state(token) == before

    def test_setting_current_value_is_success(self, token):
        token.set_pause_status(DEPLOYER, False).expect_ok()
        assert not token.is_paused()


class TestMetadata:
    def test_default_metadata(self, token):
        assert token.get_name() == "TokenCraft"
        assert token.get_symbol() == "TCRAFT"
        assert token.get_decimals() == 8

    def test_configured_metadata(self):
        t = TokenLedger(owner="admin", metadata=TokenMetadata(name="Other", symbol="OTH", decimals=2))
        assert (t.get_name(), t.get_symbol(), t.get_decimals()) == ("Other", "OTH", 2)
        assert t.owner == "admin"


class TestInvariants:
    def test_supply_matches_balances_through_mixed_sequence(self, funded):
        funded.set_role(DEPLOYER, Role.BURNER, W2, True).expect_ok()
        steps = [
            lambda: funded.transfer(W1, 70, W2),
            lambda: funded.burn(W2, 30),
            lambda: funded.mint(DEPLOYER, 15, W3),
            lambda: funded.transfer_fixed(W3, 15, W3, W1, b"x"),
            lambda: funded.burn(W2, 1000),
            lambda: funded.transfer(W3, 1, W1),
        ]
        for step in steps:
            step()
            snap = funded.snapshot()
            assert snap.total_supply == snap.sum_balances()
            assert all(v >= 0 for v in snap.balances.values())
        assert funded.get_balance(W1) == 145
        assert funded.get_balance(W2) == 40
        assert funded.get_total_supply() == 185

    def test_failed_calls_record_no_events(self, token):
        token.mint(W1, 10, W1)
        token.transfer(W1, 10, W2)
        token.set_pause_status(W1, True)
        assert len(token.events) == 0
