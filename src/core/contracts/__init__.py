"""
Contract Validation Module

Модуль для валидации JSON контрактов vault (события и снапшоты).
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    VaultEventValidator,
    VaultSnapshotValidator,
    validate_vault_event,
    validate_vault_snapshot,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "VaultEventValidator",
    "VaultSnapshotValidator",
    # Functions
    "validate_vault_event",
    "validate_vault_snapshot",
]
