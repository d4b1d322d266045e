"""
VaultSnapshot — Модель состояния vault

Immutable Pydantic модель, представляющая снапшот состояния vault для
read-only потребителей (front-end, индексаторы).
Полная совместимость с JSON Schema (contracts/schema/vault_snapshot.json).
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class LifecycleState(str, Enum):
    """
    Состояние жизненного цикла vault.

    ACTIVE: мутирующие операции разрешены
    PAUSED: движение средств запрещено, read-only views доступны
    """

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"


# =============================================================================
# NESTED MODELS
# =============================================================================


class VenueRecord(BaseModel):
    """Запись аллокации по venue."""

    venue: str = Field(..., min_length=1, description="Имя venue")
    allocated: int = Field(..., ge=0, description="Целевая аллокация (assets)")
    deployed: int = Field(..., ge=0, description="Фактически задеплоено (assets)")

    model_config = {"frozen": True}


# =============================================================================
# VAULT SNAPSHOT MODEL
# =============================================================================


class VaultSnapshot(BaseModel):
    """
    Снапшот состояния vault.

    Immutable модель (frozen=True). Содержит:
    - Метаданные (vault, asset, name, symbol, decimals)
    - Lifecycle (state, owner, deposit_limit)
    - Учёт (total_assets = idle_assets + total_deployed, total_supply)
    - Аллокации по venue (в порядке регистрации)
    """

    # Метаданные
    schema_version: str = Field(
        ..., pattern="^1$", description="Версия схемы для tracking совместимости"
    )
    vault: str = Field(..., min_length=1, description="Адрес vault")
    asset: str = Field(..., min_length=1, description="Адрес underlying asset")
    name: str = Field(..., min_length=1, description="Имя share токена")
    symbol: str = Field(..., min_length=1, description="Символ share токена")
    decimals: int = Field(..., ge=0, description="Точность shares (= точность asset)")

    # Lifecycle
    state: LifecycleState = Field(..., description="ACTIVE / PAUSED")
    owner: str = Field(..., min_length=1, description="Владелец (ZERO_ADDRESS после renounce)")
    deposit_limit: int = Field(..., ge=0, description="Deposit limit (UNLIMITED если не задан)")

    # Учёт
    total_assets: int = Field(..., ge=0, description="Total managed assets")
    idle_assets: int = Field(..., ge=0, description="On-hand баланс vault")
    total_deployed: int = Field(..., ge=0, description="Сумма задеплоенного по всем venue")
    total_supply: int = Field(..., ge=0, description="Total supply shares")

    venues: list[VenueRecord] = Field(
        default_factory=list, description="Аллокации в порядке регистрации venue"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_managed_assets(self) -> "VaultSnapshot":
        """total_assets == idle_assets + total_deployed и deployed сходится по venue."""
        if self.total_assets != self.idle_assets + self.total_deployed:
            raise ValueError(
                f"total_assets {self.total_assets} != idle {self.idle_assets} "
                f"+ deployed {self.total_deployed}"
            )
        venues_deployed = sum(v.deployed for v in self.venues)
        if venues_deployed != self.total_deployed:
            raise ValueError(
                f"total_deployed {self.total_deployed} != sum over venues {venues_deployed}"
            )
        return self

    @property
    def is_paused(self) -> bool:
        return self.state == LifecycleState.PAUSED
