"""Vault Lifecycle — pause state machine и access control владельца.

Состояния: ACTIVE / PAUSED
- ACTIVE → PAUSED: pause() (owner-only)
- PAUSED → ACTIVE: unpause() (owner-only)

Ownership:
- transfer_ownership: передача единственному новому владельцу (не null)
- renounce_ownership: owner = ZERO_ADDRESS, все owner-gated операции
  становятся недоступны навсегда
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.domain.errors import AuthorizationError, PausedError, ValidationError
from src.core.domain.units import ZERO_ADDRESS, is_null_identity, validate_identity
from src.core.domain.vault_state import LifecycleState
from src.vault.undo import UndoLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LifecycleTransitionResult:
    """Результат перехода lifecycle."""

    new_state: LifecycleState
    previous_state: LifecycleState

    # Диагностика
    transition_occurred: bool
    transition_reason: str

    # Для отладки
    details: str


@dataclass(frozen=True)
class OwnershipTransferResult:
    """Результат смены владельца."""

    previous_owner: str
    new_owner: str
    renounced: bool


class VaultLifecycle:
    """Lifecycle state machine vault.

    Живёт всё время жизни vault: создаётся ACTIVE с заданным владельцем,
    никогда не уничтожается.
    """

    def __init__(self, owner: str, undo: Optional[UndoLog] = None):
        """
        Args:
            owner: начальный владелец (не null)
            undo: журнал отката транзакций vault
        """
        self._undo = undo or UndoLog()
        self._owner = validate_identity(owner, "owner")
        self._state = LifecycleState.ACTIVE

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def is_paused(self) -> bool:
        return self._state == LifecycleState.PAUSED

    @property
    def is_renounced(self) -> bool:
        return is_null_identity(self._owner)

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def require_owner(self, caller: str) -> None:
        """Raises AuthorizationError если caller не владелец (или владение отозвано)."""
        if self.is_renounced or caller != self._owner:
            raise AuthorizationError(f"Unauthorized account: {caller}")

    def require_active(self) -> None:
        """Raises PausedError если vault на паузе."""
        if self.is_paused:
            raise PausedError("Vault is paused")

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def pause(self, caller: str) -> LifecycleTransitionResult:
        """ACTIVE → PAUSED."""
        self.require_owner(caller)
        if self.is_paused:
            raise ValidationError("Vault is already paused")

        return self._transition(LifecycleState.PAUSED, "paused_by_owner", caller)

    def unpause(self, caller: str) -> LifecycleTransitionResult:
        """PAUSED → ACTIVE."""
        self.require_owner(caller)
        if not self.is_paused:
            raise ValidationError("Vault is not paused")

        return self._transition(LifecycleState.ACTIVE, "unpaused_by_owner", caller)

    def transfer_ownership(self, caller: str, new_owner: str) -> OwnershipTransferResult:
        self.require_owner(caller)
        validate_identity(new_owner, "new owner")

        previous = self._owner
        self._undo.record_attr(self, "_owner")
        self._owner = new_owner
        logger.info("Ownership transferred: %s → %s", previous, new_owner)
        return OwnershipTransferResult(previous_owner=previous, new_owner=new_owner, renounced=False)

    def renounce_ownership(self, caller: str) -> OwnershipTransferResult:
        self.require_owner(caller)

        previous = self._owner
        self._undo.record_attr(self, "_owner")
        self._owner = ZERO_ADDRESS
        logger.info("Ownership renounced by %s", previous)
        return OwnershipTransferResult(previous_owner=previous, new_owner=ZERO_ADDRESS, renounced=True)

    def _transition(
        self, new_state: LifecycleState, reason: str, caller: str
    ) -> LifecycleTransitionResult:
        previous = self._state
        self._undo.record_attr(self, "_state")
        self._state = new_state
        logger.info("Lifecycle %s → %s by %s", previous.value, new_state.value, caller)

        return LifecycleTransitionResult(
            new_state=new_state,
            previous_state=previous,
            transition_occurred=previous != new_state,
            transition_reason=reason,
            details=f"{previous.value} → {new_state.value}, caller={caller}",
        )
