"""Тесты для TokenizedVault: withdraw / redeem.

Coverage:
- Сжигание shares и выплата assets
- Вывод за счёт чужих shares через allowance
- Ограничения max_withdraw / max_redeem
- Округление в пользу vault
- Пауза
"""

import pytest

from src.core.domain.errors import (
    AllowanceError,
    LimitExceededError,
    PausedError,
    ValidationError,
    VaultErrorKind,
)
from src.core.domain.events import TransferEvent, WithdrawEvent
from src.core.domain.units import UINT256_MAX, ZERO_ADDRESS
from src.vault.asset import InMemoryAsset
from src.vault.vault import TokenizedVault

VAULT = "0x" + "77" * 20
TOKEN = "0x" + "ee" * 20
OWNER = "0x" + "0a" * 20
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
CAROL = "0x" + "c3" * 20


@pytest.fixture
def asset():
    asset = InMemoryAsset(TOKEN, decimals=18)
    for holder in (ALICE, BOB):
        asset.mint(holder, 1000)
        asset.approve(holder, VAULT, UINT256_MAX)
    return asset


@pytest.fixture
def vault(asset):
    """Vault со 100 shares у ALICE и 50 у BOB."""
    vault = TokenizedVault(VAULT, asset, OWNER)
    vault.deposit(ALICE, 100, ALICE)
    vault.deposit(BOB, 50, BOB)
    return vault


class TestWithdraw:
    """Тесты withdraw."""

    def test_withdraw_own_shares(self, vault, asset):
        shares = vault.withdraw(ALICE, 40, ALICE, ALICE)

        assert shares == 40
        assert vault.balance_of(ALICE) == 60
        assert vault.total_supply() == 110
        assert vault.total_assets() == 110
        assert asset.balance_of(ALICE) == 940

    def test_withdraw_to_other_receiver(self, vault, asset):
        vault.withdraw(ALICE, 10, CAROL, ALICE)

        assert asset.balance_of(CAROL) == 10
        assert asset.balance_of(ALICE) == 900

    def test_withdraw_events(self, vault):
        """Withdraw эмитит Transfer(owner → null) и Withdraw."""
        vault.withdraw(ALICE, 10, CAROL, ALICE)

        transfer, withdraw = vault.events[-2:]
        assert isinstance(transfer, TransferEvent)
        assert transfer.sender == ALICE
        assert transfer.recipient == ZERO_ADDRESS
        assert isinstance(withdraw, WithdrawEvent)
        assert withdraw.sender == ALICE
        assert withdraw.receiver == CAROL
        assert withdraw.owner == ALICE
        assert withdraw.assets == 10
        assert withdraw.shares == 10

    def test_withdraw_rounds_shares_up(self, vault, asset):
        """После yield вывод 1 asset сжигает 1 share (ceil)."""
        asset.mint(VAULT, 1)

        assert vault.withdraw(BOB, 1, BOB, BOB) == 1
        assert vault.balance_of(BOB) == 49

    def test_withdraw_exceeds_max(self, vault):
        """assets > max_withdraw(owner) → LimitExceededError."""
        assert vault.max_withdraw(BOB) == 50

        with pytest.raises(LimitExceededError) as exc_info:
            vault.withdraw(BOB, 51, BOB, BOB)
        assert exc_info.value.kind == VaultErrorKind.LIMIT_EXCEEDED
        assert vault.balance_of(BOB) == 50

    def test_withdraw_without_shares(self, vault):
        with pytest.raises(LimitExceededError):
            vault.withdraw(CAROL, 1, CAROL, CAROL)

    def test_zero_assets_rejected(self, vault):
        with pytest.raises(ValidationError):
            vault.withdraw(ALICE, 0, ALICE, ALICE)

    def test_null_owner_rejected(self, vault):
        with pytest.raises(ValidationError):
            vault.withdraw(ALICE, 1, ALICE, ZERO_ADDRESS)


class TestDelegatedWithdraw:
    """Вывод за счёт shares другого owner'а."""

    def test_requires_allowance(self, vault):
        """caller ≠ owner без allowance → AllowanceError, состояние не меняется."""
        with pytest.raises(AllowanceError):
            vault.withdraw(CAROL, 10, CAROL, ALICE)

        assert vault.balance_of(ALICE) == 100

    def test_spends_allowance(self, vault, asset):
        vault.approve(ALICE, CAROL, 30)

        vault.withdraw(CAROL, 10, CAROL, ALICE)

        assert vault.allowance(ALICE, CAROL) == 20
        assert vault.balance_of(ALICE) == 90
        assert asset.balance_of(CAROL) == 10

    def test_redeem_spends_allowance(self, vault):
        vault.approve(ALICE, CAROL, 30)

        vault.redeem(CAROL, 30, CAROL, ALICE)

        assert vault.allowance(ALICE, CAROL) == 0
        with pytest.raises(AllowanceError):
            vault.redeem(CAROL, 1, CAROL, ALICE)

    def test_infinite_allowance(self, vault):
        vault.approve(ALICE, CAROL, UINT256_MAX)

        vault.redeem(CAROL, 10, CAROL, ALICE)

        assert vault.allowance(ALICE, CAROL) == UINT256_MAX

    def test_allowance_checked_after_limit(self, vault):
        """LimitExceededError предшествует AllowanceError."""
        with pytest.raises(LimitExceededError):
            vault.redeem(CAROL, 101, CAROL, ALICE)


class TestRedeem:
    """Тесты redeem."""

    def test_redeem_all(self, vault, asset):
        assets = vault.redeem(ALICE, 100, ALICE, ALICE)

        assert assets == 100
        assert vault.balance_of(ALICE) == 0
        assert asset.balance_of(ALICE) == 1000

    def test_redeem_rounds_assets_down(self, vault, asset):
        """Yield 1 unit на 150 shares: redeem(1) → floor(151/150) == 1."""
        asset.mint(VAULT, 1)

        assert vault.preview_redeem(1) == 1
        assert vault.redeem(BOB, 1, BOB, BOB) == 1

    def test_yield_accrues_to_holders(self, vault, asset):
        """Yield 150 удваивает стоимость shares."""
        asset.mint(VAULT, 150)

        assert vault.redeem(ALICE, 100, ALICE, ALICE) == 200
        assert vault.max_withdraw(BOB) == 100

    def test_redeem_exceeds_balance(self, vault):
        assert vault.max_redeem(BOB) == 50

        with pytest.raises(LimitExceededError):
            vault.redeem(BOB, 51, BOB, BOB)

    def test_redeem_worthless_shares_rejected(self, vault, asset):
        """Shares без обеспечения: redeem дал бы 0 assets."""
        asset.burn(VAULT, 150)

        with pytest.raises(ValidationError, match="Zero assets"):
            vault.redeem(ALICE, 100, ALICE, ALICE)
        assert vault.balance_of(ALICE) == 100


class TestPausedWithdrawals:
    """withdraw / redeem на паузе."""

    def test_withdraw_and_redeem_paused(self, vault):
        vault.pause(OWNER)

        with pytest.raises(PausedError):
            vault.withdraw(ALICE, 10, ALICE, ALICE)
        with pytest.raises(PausedError):
            vault.redeem(ALICE, 10, ALICE, ALICE)

        assert vault.max_withdraw(ALICE) == 0
        assert vault.max_redeem(ALICE) == 0
        assert vault.balance_of(ALICE) == 100

    def test_unpause_restores_withdrawals(self, vault):
        vault.pause(OWNER)
        vault.unpause(OWNER)

        assert vault.redeem(ALICE, 10, ALICE, ALICE) == 10
