import pytest

from ledger.roles import Role
from ledger.token import TokenLedger

DEPLOYER = "deployer"
W1 = "wallet_1"
W2 = "wallet_2"
W3 = "wallet_3"


@pytest.fixture
def token():
    """Fresh ledger per test, owned by the deployer."""
    return TokenLedger(owner=DEPLOYER)


@pytest.fixture
def funded(token):
    """Deployer holds minter; wallet_1 holds 200 units."""
    token.set_role(DEPLOYER, Role.MINTER, DEPLOYER, True).expect_ok()
    token.mint(DEPLOYER, 200, W1).expect_ok()
    return token


def full_state(token):
    """Everything a failed call must leave untouched."""
    snap = token.snapshot()
    return (
        snap.balances,
        snap.total_supply,
        token.roles.snapshot(),
        token.is_paused(),
        len(token.events),
    )
