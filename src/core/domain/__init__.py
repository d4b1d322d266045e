"""
Domain models and value objects.

Contains fundamental vault entities: units, errors, event records, snapshots.
"""

from src.core.domain.errors import (
    AllocationError,
    AllocationExceedsAssetsError,
    AllowanceError,
    AuthorizationError,
    InsufficientBalanceError,
    InsufficientDeployedError,
    InsufficientIdleAssetsError,
    LimitExceededError,
    PausedError,
    ReentrancyError,
    TransferFailedError,
    UnknownVenueError,
    ValidationError,
    VaultError,
    VaultErrorKind,
)
from src.core.domain.events import (
    AllocationChangedEvent,
    AnyVaultEvent,
    ApprovalEvent,
    DepositEvent,
    DepositLimitUpdatedEvent,
    DeploymentReconciledEvent,
    OwnershipTransferredEvent,
    PausedEvent,
    TransferEvent,
    UnpausedEvent,
    VaultEvent,
    VenueDeployedEvent,
    VenueWithdrawnEvent,
    WithdrawEvent,
)
from src.core.domain.units import (
    UINT256_MAX,
    UNLIMITED,
    ZERO_ADDRESS,
    is_null_identity,
    validate_amount,
    validate_decimals,
    validate_identity,
)
from src.core.domain.vault_state import LifecycleState, VaultSnapshot, VenueRecord

__all__ = [
    # Units module
    "UINT256_MAX",
    "UNLIMITED",
    "ZERO_ADDRESS",
    "is_null_identity",
    "validate_amount",
    "validate_decimals",
    "validate_identity",
    # Errors
    "VaultError",
    "VaultErrorKind",
    "ValidationError",
    "LimitExceededError",
    "InsufficientBalanceError",
    "PausedError",
    "AllowanceError",
    "AllocationError",
    "AllocationExceedsAssetsError",
    "UnknownVenueError",
    "InsufficientDeployedError",
    "InsufficientIdleAssetsError",
    "AuthorizationError",
    "ReentrancyError",
    "TransferFailedError",
    # Events
    "VaultEvent",
    "AnyVaultEvent",
    "DepositEvent",
    "WithdrawEvent",
    "TransferEvent",
    "ApprovalEvent",
    "DepositLimitUpdatedEvent",
    "AllocationChangedEvent",
    "VenueDeployedEvent",
    "VenueWithdrawnEvent",
    "DeploymentReconciledEvent",
    "PausedEvent",
    "UnpausedEvent",
    "OwnershipTransferredEvent",
    # Snapshot model
    "LifecycleState",
    "VaultSnapshot",
    "VenueRecord",
]
