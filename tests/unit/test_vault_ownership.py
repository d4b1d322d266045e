"""Тесты для lifecycle операций TokenizedVault и журнала событий."""

import logging

import pytest

from src.core.domain.errors import AuthorizationError, TransferFailedError, ValidationError
from src.core.domain.events import OwnershipTransferredEvent, PausedEvent, UnpausedEvent
from src.core.domain.units import UINT256_MAX, ZERO_ADDRESS
from src.core.domain.vault_state import LifecycleState
from src.vault.asset import InMemoryAsset
from src.vault.vault import TokenizedVault

VAULT = "0x" + "77" * 20
TOKEN = "0x" + "ee" * 20
OWNER = "0x" + "0a" * 20
SUCCESSOR = "0x" + "0c" * 20
ALICE = "0x" + "a1" * 20


@pytest.fixture
def vault():
    asset = InMemoryAsset(TOKEN, decimals=18)
    asset.mint(ALICE, 1000)
    asset.approve(ALICE, VAULT, UINT256_MAX)
    return TokenizedVault(VAULT, asset, OWNER)


class TestPauseEvents:
    """pause / unpause на уровне vault."""

    def test_pause_emits_event(self, vault):
        result = vault.pause(OWNER)

        assert result.new_state == LifecycleState.PAUSED
        assert vault.paused
        event = vault.events[-1]
        assert isinstance(event, PausedEvent)
        assert event.account == OWNER

    def test_unpause_emits_event(self, vault):
        vault.pause(OWNER)
        vault.unpause(OWNER)

        assert not vault.paused
        assert isinstance(vault.events[-1], UnpausedEvent)

    def test_rejected_pause_emits_nothing(self, vault):
        with pytest.raises(AuthorizationError):
            vault.pause(ALICE)
        with pytest.raises(ValidationError):
            vault.unpause(OWNER)
        assert vault.events == ()


class TestOwnershipEvents:
    """transfer_ownership / renounce_ownership на уровне vault."""

    def test_transfer_ownership(self, vault):
        vault.transfer_ownership(OWNER, SUCCESSOR)

        assert vault.owner == SUCCESSOR
        event = vault.events[-1]
        assert isinstance(event, OwnershipTransferredEvent)
        assert (event.previous_owner, event.new_owner) == (OWNER, SUCCESSOR)

        vault.pause(SUCCESSOR)
        with pytest.raises(AuthorizationError):
            vault.unpause(OWNER)

    def test_renounce_is_permanent(self, vault):
        """После renounce ни одна owner-gated операция не доступна."""
        vault.renounce_ownership(OWNER)

        assert vault.owner == ZERO_ADDRESS
        assert vault.events[-1].new_owner == ZERO_ADDRESS
        for call in (
            lambda: vault.pause(OWNER),
            lambda: vault.set_deposit_limit(OWNER, 10),
            lambda: vault.set_allocation(OWNER, "aave", 0),
            lambda: vault.transfer_ownership(OWNER, SUCCESSOR),
        ):
            with pytest.raises(AuthorizationError):
                call()

    def test_user_operations_survive_renounce(self, vault):
        vault.renounce_ownership(OWNER)

        assert vault.deposit(ALICE, 10, ALICE) == 10
        assert vault.redeem(ALICE, 10, ALICE, ALICE) == 10


class TestJournal:
    """Журнал событий и snapshot."""

    def test_sequence_is_contiguous_after_rollback(self, vault):
        """Откатанные события не оставляют дыр в sequence."""
        vault.deposit(ALICE, 10, ALICE)
        with pytest.raises(TransferFailedError):
            vault.deposit(ALICE, 10_000, ALICE)
        vault.deposit(ALICE, 5, ALICE)

        assert [e.sequence for e in vault.events] == list(range(len(vault.events)))

    def test_rollback_logged(self, vault, caplog):
        with caplog.at_level(logging.WARNING, logger="src.vault.vault"):
            with pytest.raises(TransferFailedError):
                vault.deposit(ALICE, 10_000, ALICE)

        assert "deposit rolled back" in caplog.text

    def test_snapshot(self, vault):
        vault.deposit(ALICE, 100, ALICE)
        vault.set_allocation(OWNER, "aave", 30)
        vault.pause(OWNER)

        snapshot = vault.snapshot()

        assert snapshot.schema_version == "1"
        assert snapshot.vault == VAULT
        assert snapshot.asset == TOKEN
        assert snapshot.decimals == 18
        assert snapshot.is_paused
        assert snapshot.total_assets == 100
        assert snapshot.idle_assets == 100
        assert snapshot.total_supply == 100
        assert [v.venue for v in snapshot.venues] == ["aave"]
        assert snapshot.venues[0].allocated == 30
