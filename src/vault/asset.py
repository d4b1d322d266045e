"""Collaborators — underlying asset и venue adapters.

UnderlyingAsset: ERC-20 подобный контракт asset. Операции перевода
возвращают bool; vault превращает False в TransferFailedError.

VenueAdapter: интеграция с внешним yield venue. Реальная логика протоколов
вне ядра; InMemoryVenueAdapter только перемещает custody asset между
адресом vault и адресом venue.
"""

from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

from src.core.domain.units import (
    UINT256_MAX,
    is_null_identity,
    validate_decimals,
)


# =============================================================================
# PROTOCOLS
# =============================================================================


@runtime_checkable
class UnderlyingAsset(Protocol):
    """Интерфейс underlying asset, потребляемый vault."""

    address: str
    decimals: int

    def balance_of(self, owner: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool: ...


@runtime_checkable
class VenueAdapter(Protocol):
    """Интерфейс adapter'а внешнего venue."""

    def deploy(self, amount: int) -> bool: ...

    def withdraw(self, amount: int) -> bool: ...

    def balance(self) -> Optional[int]: ...


# =============================================================================
# IN-MEMORY ASSET
# =============================================================================


class InMemoryAsset:
    """In-memory ERC-20 asset для локальной симуляции и тестов.

    Невалидные переводы (недостаточный баланс/allowance, null получатель)
    возвращают False и не меняют состояние.
    """

    def __init__(self, address: str, decimals: int = 18, name: str = "Mock Token", symbol: str = "MOCK"):
        self.address = address
        self.decimals = validate_decimals(decimals)
        self.name = name
        self.symbol = symbol
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self.total_supply = 0

    def balance_of(self, owner: str) -> int:
        return self._balances.get(owner, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def mint(self, to: str, amount: int) -> None:
        """Выпуск asset (seed балансов, симуляция yield прямым переводом в vault)."""
        if amount < 0:
            raise ValueError(f"amount cannot be negative: {amount}")
        self._balances[to] = self.balance_of(to) + amount
        self.total_supply += amount

    def burn(self, owner: str, amount: int) -> None:
        """Сжигание asset (симуляция убытка venue)."""
        if amount > self.balance_of(owner):
            raise ValueError(f"burn amount {amount} exceeds balance of {owner}")
        self._balances[owner] = self.balance_of(owner) - amount
        self.total_supply -= amount

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0:
            return False
        self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        if amount < 0 or is_null_identity(to) or self.balance_of(sender) < amount:
            return False
        self._move(sender, to, amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        allowed = self.allowance(owner, spender)
        if amount < 0 or is_null_identity(to) or allowed < amount or self.balance_of(owner) < amount:
            return False
        if allowed != UINT256_MAX:
            self._allowances[(owner, spender)] = allowed - amount
        self._move(owner, to, amount)
        return True

    def _move(self, sender: str, to: str, amount: int) -> None:
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[to] = self.balance_of(to) + amount


# =============================================================================
# IN-MEMORY VENUE ADAPTER
# =============================================================================


class InMemoryVenueAdapter:
    """Venue adapter, перемещающий custody на InMemoryAsset.

    deploy: vault → venue_address
    withdraw: venue_address → vault
    balance: баланс venue_address (источник для reconcile)
    """

    def __init__(self, asset: InMemoryAsset, vault_address: str, venue_address: str):
        self.asset = asset
        self.vault_address = vault_address
        self.venue_address = venue_address

    def deploy(self, amount: int) -> bool:
        return self.asset.transfer(self.vault_address, self.venue_address, amount)

    def withdraw(self, amount: int) -> bool:
        return self.asset.transfer(self.venue_address, self.vault_address, amount)

    def balance(self) -> Optional[int]:
        return self.asset.balance_of(self.venue_address)
