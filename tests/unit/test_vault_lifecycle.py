"""Тесты для VaultLifecycle.

Coverage:
- ACTIVE ↔ PAUSED переходы
- Отказ повторной паузы / снятия паузы
- Owner-only доступ
- Передача и отзыв владения
"""

import pytest

from src.core.domain.errors import AuthorizationError, PausedError, ValidationError
from src.core.domain.units import ZERO_ADDRESS
from src.core.domain.vault_state import LifecycleState
from src.vault.lifecycle import VaultLifecycle

OWNER = "0x" + "0a" * 20
STRANGER = "0x" + "0b" * 20
SUCCESSOR = "0x" + "0c" * 20


class TestPauseStateMachine:
    """Тесты pause / unpause."""

    def test_initial_state_active(self):
        lifecycle = VaultLifecycle(OWNER)

        assert lifecycle.state == LifecycleState.ACTIVE
        assert not lifecycle.is_paused
        assert lifecycle.owner == OWNER

    def test_pause(self):
        """ACTIVE → PAUSED."""
        lifecycle = VaultLifecycle(OWNER)

        result = lifecycle.pause(OWNER)

        assert result.new_state == LifecycleState.PAUSED
        assert result.previous_state == LifecycleState.ACTIVE
        assert result.transition_occurred
        assert result.transition_reason == "paused_by_owner"
        assert lifecycle.is_paused

    def test_unpause(self):
        """PAUSED → ACTIVE."""
        lifecycle = VaultLifecycle(OWNER)
        lifecycle.pause(OWNER)

        result = lifecycle.unpause(OWNER)

        assert result.new_state == LifecycleState.ACTIVE
        assert result.transition_reason == "unpaused_by_owner"
        assert not lifecycle.is_paused

    def test_pause_twice_rejected(self):
        lifecycle = VaultLifecycle(OWNER)
        lifecycle.pause(OWNER)

        with pytest.raises(ValidationError, match="already paused"):
            lifecycle.pause(OWNER)

    def test_unpause_active_rejected(self):
        lifecycle = VaultLifecycle(OWNER)

        with pytest.raises(ValidationError, match="not paused"):
            lifecycle.unpause(OWNER)

    def test_require_active(self):
        lifecycle = VaultLifecycle(OWNER)
        lifecycle.require_active()

        lifecycle.pause(OWNER)
        with pytest.raises(PausedError):
            lifecycle.require_active()

    def test_non_owner_cannot_pause(self):
        lifecycle = VaultLifecycle(OWNER)

        with pytest.raises(AuthorizationError):
            lifecycle.pause(STRANGER)
        assert lifecycle.state == LifecycleState.ACTIVE


class TestOwnership:
    """Тесты transfer_ownership / renounce_ownership."""

    def test_null_initial_owner_rejected(self):
        with pytest.raises(ValidationError):
            VaultLifecycle(ZERO_ADDRESS)

    def test_transfer_ownership(self):
        lifecycle = VaultLifecycle(OWNER)

        result = lifecycle.transfer_ownership(OWNER, SUCCESSOR)

        assert result.previous_owner == OWNER
        assert result.new_owner == SUCCESSOR
        assert not result.renounced
        assert lifecycle.owner == SUCCESSOR

        with pytest.raises(AuthorizationError):
            lifecycle.require_owner(OWNER)
        lifecycle.require_owner(SUCCESSOR)

    def test_transfer_to_null_rejected(self):
        """Передача null identity → ValidationError, владелец не меняется."""
        lifecycle = VaultLifecycle(OWNER)

        with pytest.raises(ValidationError):
            lifecycle.transfer_ownership(OWNER, ZERO_ADDRESS)
        assert lifecycle.owner == OWNER

    def test_transfer_by_stranger_rejected(self):
        lifecycle = VaultLifecycle(OWNER)

        with pytest.raises(AuthorizationError):
            lifecycle.transfer_ownership(STRANGER, STRANGER)

    def test_renounce_disables_owner_operations(self):
        """После renounce все owner-gated операции недоступны."""
        lifecycle = VaultLifecycle(OWNER)

        result = lifecycle.renounce_ownership(OWNER)

        assert result.renounced
        assert lifecycle.owner == ZERO_ADDRESS
        assert lifecycle.is_renounced

        with pytest.raises(AuthorizationError):
            lifecycle.pause(OWNER)
        with pytest.raises(AuthorizationError):
            lifecycle.pause(ZERO_ADDRESS)
        with pytest.raises(AuthorizationError):
            lifecycle.transfer_ownership(OWNER, SUCCESSOR)
