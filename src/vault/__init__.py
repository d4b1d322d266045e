"""Vault — ledger, аллокации, lifecycle и entry-point orchestrator.

- ShareLedger: балансы и allowances share токена
- AllocationTracker: аллокации и deployed по venue
- VaultLifecycle: pause state machine и владелец
- UndoLog: откат транзакций по затронутым ключам
- TokenizedVault: deposit / mint / withdraw / redeem
"""

from .allocation import AllocationTracker, VenueEntry, validate_venue
from .asset import InMemoryAsset, InMemoryVenueAdapter, UnderlyingAsset, VenueAdapter
from .config import VaultConfig
from .guard import ReentrancyGuard
from .journal import EventJournal
from .ledger import ShareLedger
from .lifecycle import LifecycleTransitionResult, OwnershipTransferResult, VaultLifecycle
from .undo import UndoLog
from .vault import TokenizedVault

__all__ = [
    "AllocationTracker",
    "VenueEntry",
    "validate_venue",
    "InMemoryAsset",
    "InMemoryVenueAdapter",
    "UnderlyingAsset",
    "VenueAdapter",
    "VaultConfig",
    "ReentrancyGuard",
    "EventJournal",
    "ShareLedger",
    "LifecycleTransitionResult",
    "OwnershipTransferResult",
    "VaultLifecycle",
    "UndoLog",
    "TokenizedVault",
]
