"""
Events — Записи событий vault

Immutable Pydantic модели, представляющие append-only журнал событий для
off-chain индексации. Полная совместимость с JSON Schema
(contracts/schema/vault_event.json).

Каждое событие несёт полный набор сумм и идентичностей, достаточный для
восстановления изменений ledger без повторных запросов.
"""

from typing import Literal, Union

from pydantic import BaseModel, Field


# =============================================================================
# BASE
# =============================================================================


class VaultEvent(BaseModel):
    """
    Базовая запись события.

    sequence — монотонный номер события внутри одного vault.
    """

    event: str = Field(..., min_length=1, description="Тип события")
    sequence: int = Field(..., ge=0, description="Монотонный номер события")

    model_config = {"frozen": True}


# =============================================================================
# FUND MOVEMENT
# =============================================================================


class DepositEvent(VaultEvent):
    """Завершён deposit или mint (sender заплатил assets, owner получил shares)."""

    event: Literal["Deposit"] = "Deposit"
    sender: str = Field(..., min_length=1, description="Кто заплатил assets")
    owner: str = Field(..., min_length=1, description="Получатель shares")
    assets: int = Field(..., ge=0, description="Сумма assets")
    shares: int = Field(..., ge=0, description="Сумма выпущенных shares")


class WithdrawEvent(VaultEvent):
    """Завершён withdraw или redeem."""

    event: Literal["Withdraw"] = "Withdraw"
    sender: str = Field(..., min_length=1, description="Инициатор вызова")
    receiver: str = Field(..., min_length=1, description="Получатель assets")
    owner: str = Field(..., min_length=1, description="Владелец сожжённых shares")
    assets: int = Field(..., ge=0, description="Сумма выплаченных assets")
    shares: int = Field(..., ge=0, description="Сумма сожжённых shares")


# =============================================================================
# SHARE TOKEN
# =============================================================================


class TransferEvent(VaultEvent):
    """Перемещение shares (mint/burn используют null identity)."""

    event: Literal["Transfer"] = "Transfer"
    sender: str = Field(..., min_length=1)
    recipient: str = Field(..., min_length=1)
    value: int = Field(..., ge=0)


class ApprovalEvent(VaultEvent):
    """Установлен allowance."""

    event: Literal["Approval"] = "Approval"
    owner: str = Field(..., min_length=1)
    spender: str = Field(..., min_length=1)
    value: int = Field(..., ge=0)


# =============================================================================
# CONFIGURATION
# =============================================================================


class DepositLimitUpdatedEvent(VaultEvent):
    event: Literal["DepositLimitUpdated"] = "DepositLimitUpdated"
    old_limit: int = Field(..., ge=0)
    new_limit: int = Field(..., ge=0)


class AllocationChangedEvent(VaultEvent):
    event: Literal["AllocationChanged"] = "AllocationChanged"
    venue: str = Field(..., min_length=1)
    old_amount: int = Field(..., ge=0)
    new_amount: int = Field(..., ge=0)


class VenueDeployedEvent(VaultEvent):
    event: Literal["VenueDeployed"] = "VenueDeployed"
    venue: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)
    deployed: int = Field(..., ge=0, description="Задеплоено в venue после операции")


class VenueWithdrawnEvent(VaultEvent):
    event: Literal["VenueWithdrawn"] = "VenueWithdrawn"
    venue: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)
    deployed: int = Field(..., ge=0, description="Задеплоено в venue после операции")


class DeploymentReconciledEvent(VaultEvent):
    event: Literal["DeploymentReconciled"] = "DeploymentReconciled"
    venue: str = Field(..., min_length=1)
    old_deployed: int = Field(..., ge=0)
    new_deployed: int = Field(..., ge=0)


# =============================================================================
# LIFECYCLE
# =============================================================================


class PausedEvent(VaultEvent):
    event: Literal["Paused"] = "Paused"
    account: str = Field(..., min_length=1, description="Кто поставил паузу")


class UnpausedEvent(VaultEvent):
    event: Literal["Unpaused"] = "Unpaused"
    account: str = Field(..., min_length=1, description="Кто снял паузу")


class OwnershipTransferredEvent(VaultEvent):
    event: Literal["OwnershipTransferred"] = "OwnershipTransferred"
    previous_owner: str = Field(..., min_length=1)
    new_owner: str = Field(..., min_length=1)


AnyVaultEvent = Union[
    DepositEvent,
    WithdrawEvent,
    TransferEvent,
    ApprovalEvent,
    DepositLimitUpdatedEvent,
    AllocationChangedEvent,
    VenueDeployedEvent,
    VenueWithdrawnEvent,
    DeploymentReconciledEvent,
    PausedEvent,
    UnpausedEvent,
    OwnershipTransferredEvent,
]
