"""TokenizedVault — Entry-Point Orchestrator.

Пул одного fungible asset от многих депозиторов с выпуском пропорциональных
shares и учётом сумм, задеплоенных во внешние venue.

Порядок проверок в каждом entry point:
1. Входные данные (ValidationError)
2. Reentrancy guard (ReentrancyError)
3. Lifecycle (PausedError)
4. Лимит операции (LimitExceededError)
5. Allowance (AllowanceError)
6. Custody через asset collaborator (TransferFailedError)

Каждая операция атомарна: при любой ошибке ledger, аллокации, lifecycle,
deposit limit и журнал событий возвращаются в состояние до вызова. Откат
идёт по undo log и затрагивает только изменённые операцией ключи.
Custody перемещается последним шагом, который может завершиться ошибкой,
поэтому откат не требует возврата assets.

| Операция | Лимит                  | Конверсия                 | Ledger             | Custody            |
|----------|------------------------|---------------------------|--------------------|--------------------|
| deposit  | assets ≤ max_deposit   | preview_deposit (DOWN)    | mint(receiver)     | pull от caller     |
| mint     | shares ≤ max_mint      | preview_mint (UP)         | mint(receiver)     | pull от caller     |
| withdraw | assets ≤ max_withdraw  | preview_withdraw (UP)     | allowance, burn    | push в receiver    |
| redeem   | shares ≤ max_redeem    | preview_redeem (DOWN)     | allowance, burn    | push в receiver    |
"""

import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from src.core.domain.errors import (
    AllocationError,
    LimitExceededError,
    PausedError,
    TransferFailedError,
    ValidationError,
    VaultError,
)
from src.core.domain.events import (
    AllocationChangedEvent,
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
    UNLIMITED,
    ZERO_ADDRESS,
    validate_amount,
    validate_decimals,
    validate_identity,
)
from src.core.domain.vault_state import LifecycleState, VaultSnapshot
from src.core.math.numerical_safeguards import Rounding, saturating_sub
from src.core.math.share_math import (
    ExchangeState,
    convert_to_assets,
    convert_to_shares,
    preview_deposit,
    preview_mint,
    preview_redeem,
    preview_withdraw,
)
from src.vault.allocation import AllocationTracker, validate_venue
from src.vault.asset import UnderlyingAsset, VenueAdapter
from src.vault.config import VaultConfig
from src.vault.guard import ReentrancyGuard
from src.vault.journal import EventJournal
from src.vault.ledger import ShareLedger
from src.vault.lifecycle import LifecycleTransitionResult, VaultLifecycle
from src.vault.undo import UndoLog

logger = logging.getLogger(__name__)

SNAPSHOT_SCHEMA_VERSION = "1"


def _convert_to_shares_down(assets: int, state: ExchangeState) -> int:
    return convert_to_shares(assets, state.total_assets, state.total_supply, Rounding.DOWN)


def _convert_to_assets_down(shares: int, state: ExchangeState) -> int:
    return convert_to_assets(shares, state.total_assets, state.total_supply, Rounding.DOWN)


class TokenizedVault:
    """Tokenized vault над одним underlying asset.

    caller передаётся явно первым аргументом каждого мутирующего entry point.
    Vault владеет ledger, трекером аллокаций и журналом; внешние объекты не
    получают на них изменяемых ссылок.
    """

    def __init__(
        self,
        address: str,
        asset: UnderlyingAsset,
        owner: str,
        config: Optional[VaultConfig] = None,
    ):
        """
        Args:
            address: адрес vault (custody identity для asset)
            asset: underlying asset collaborator
            owner: начальный владелец
            config: конфигурация (опционально, используется default)
        """
        self.config = config or VaultConfig()
        self.address = validate_identity(address, "vault address")
        self._asset = asset
        self._asset_address = validate_identity(asset.address, "asset address")
        # Точность читается один раз и фиксируется на всё время жизни
        self._decimals = validate_decimals(asset.decimals)

        self._undo = UndoLog()
        self._lifecycle = VaultLifecycle(owner, self._undo)
        self._ledger = ShareLedger(self._undo)
        self._allocations = AllocationTracker(self._undo)
        self._adapters: Dict[str, VenueAdapter] = {}
        self._guard = ReentrancyGuard()
        self._journal = EventJournal(validate=self.config.validate_events)
        self._deposit_limit = validate_amount(
            self.config.deposit_limit, "deposit limit", allow_zero=True
        )

        logger.info(
            "Vault %s created: asset=%s decimals=%d owner=%s",
            self.address,
            self._asset_address,
            self._decimals,
            owner,
        )

    # =========================================================================
    # METADATA
    # =========================================================================

    @property
    def asset(self) -> str:
        return self._asset_address

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def symbol(self) -> str:
        return self.config.symbol

    @property
    def decimals(self) -> int:
        return self._decimals

    @property
    def owner(self) -> str:
        return self._lifecycle.owner

    @property
    def state(self) -> LifecycleState:
        return self._lifecycle.state

    @property
    def paused(self) -> bool:
        return self._lifecycle.is_paused

    @property
    def deposit_limit(self) -> int:
        return self._deposit_limit

    @property
    def events(self) -> Tuple[VaultEvent, ...]:
        return self._journal.events

    # =========================================================================
    # ACCOUNTING VIEWS
    # =========================================================================

    def idle_assets(self) -> int:
        """On-hand баланс asset у vault."""
        return self._asset.balance_of(self.address)

    def total_deployed(self) -> int:
        return self._allocations.total_deployed()

    def total_assets(self) -> int:
        """Total managed assets = on-hand + сумма deployed по venue."""
        return self.idle_assets() + self.total_deployed()

    def total_supply(self) -> int:
        return self._ledger.total_supply

    def balance_of(self, holder: str) -> int:
        return self._ledger.balance_of(holder)

    def allowance(self, holder: str, spender: str) -> int:
        return self._ledger.allowance(holder, spender)

    def _exchange_state(self) -> ExchangeState:
        return ExchangeState(total_assets=self.total_assets(), total_supply=self.total_supply())

    def convert_to_shares(self, assets: int) -> int:
        """Shares за assets по текущему курсу (DOWN), без учёта лимитов."""
        return self._preview(_convert_to_shares_down, assets)

    def convert_to_assets(self, shares: int) -> int:
        """Assets за shares по текущему курсу (DOWN), без учёта лимитов."""
        return self._preview(_convert_to_assets_down, shares)

    def preview_deposit(self, assets: int) -> int:
        return self._preview(preview_deposit, assets)

    def preview_mint(self, shares: int) -> int:
        return self._preview(preview_mint, shares)

    def preview_withdraw(self, assets: int) -> int:
        return self._preview(preview_withdraw, assets)

    def preview_redeem(self, shares: int) -> int:
        return self._preview(preview_redeem, shares)

    # =========================================================================
    # LIMITS
    # =========================================================================

    def max_deposit(self, receiver: str) -> int:
        """Остаток capacity до deposit limit (0 на паузе, UNLIMITED без лимита)."""
        if self.paused:
            return 0
        if self._deposit_limit == UNLIMITED:
            return UNLIMITED
        return saturating_sub(self._deposit_limit, self.total_assets())

    def max_mint(self, receiver: str) -> int:
        max_assets = self.max_deposit(receiver)
        if max_assets == UNLIMITED:
            return UNLIMITED
        return self.preview_deposit(max_assets)

    def max_withdraw(self, owner: str) -> int:
        """Стоимость shares owner'а, ограниченная on-hand ликвидностью."""
        if self.paused:
            return 0
        return min(self.preview_redeem(self._ledger.balance_of(owner)), self.idle_assets())

    def max_redeem(self, owner: str) -> int:
        """Shares owner'а, выплата за которые покрывается on-hand ликвидностью."""
        if self.paused:
            return 0
        balance = self._ledger.balance_of(owner)
        idle = self.idle_assets()
        if self.preview_redeem(balance) <= idle:
            return balance
        # DOWN: выплата за эти shares не превышает idle
        return self.convert_to_shares(idle)

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def deposit(self, caller: str, assets: int, receiver: str) -> int:
        """Депозит assets, выпуск shares receiver'у.

        Returns:
            Количество выпущенных shares
        """
        validate_identity(caller, "caller")
        validate_amount(assets, "assets")
        validate_identity(receiver, "receiver")

        with self._guard:
            self._lifecycle.require_active()
            if assets > self.max_deposit(receiver):
                raise self._reject(LimitExceededError("Deposit exceeds limit"))

            shares = self._preview(preview_deposit, assets)
            if shares == 0:
                raise self._reject(ValidationError("Zero shares"))

            with self._transaction("deposit"):
                self._mint_shares(receiver, shares)
                self._pull(caller, assets)
                self._journal.emit(
                    DepositEvent, sender=caller, owner=receiver, assets=assets, shares=shares
                )

        logger.info("Deposit: %s → %s assets=%d shares=%d", caller, receiver, assets, shares)
        return shares

    def mint(self, caller: str, shares: int, receiver: str) -> int:
        """Выпуск точного количества shares.

        Returns:
            Количество списанных assets
        """
        validate_identity(caller, "caller")
        validate_amount(shares, "shares")
        validate_identity(receiver, "receiver")

        with self._guard:
            self._lifecycle.require_active()
            if shares > self.max_mint(receiver):
                raise self._reject(LimitExceededError("Mint exceeds limit"))

            assets = self._preview(preview_mint, shares)
            if assets == 0:
                raise self._reject(ValidationError("Zero assets"))

            with self._transaction("mint"):
                self._mint_shares(receiver, shares)
                self._pull(caller, assets)
                self._journal.emit(
                    DepositEvent, sender=caller, owner=receiver, assets=assets, shares=shares
                )

        logger.info("Mint: %s → %s assets=%d shares=%d", caller, receiver, assets, shares)
        return assets

    def withdraw(self, caller: str, assets: int, receiver: str, owner: str) -> int:
        """Вывод точной суммы assets за счёт shares owner'а.

        Returns:
            Количество сожжённых shares
        """
        validate_identity(caller, "caller")
        validate_amount(assets, "assets")
        validate_identity(receiver, "receiver")
        validate_identity(owner, "owner")

        with self._guard:
            self._lifecycle.require_active()
            if assets > self.max_withdraw(owner):
                raise self._reject(LimitExceededError("Withdraw exceeds max"))

            shares = self._preview(preview_withdraw, assets)

            with self._transaction("withdraw"):
                self._burn_for(caller, owner, shares)
                self._push(receiver, assets)
                self._journal.emit(
                    WithdrawEvent,
                    sender=caller,
                    receiver=receiver,
                    owner=owner,
                    assets=assets,
                    shares=shares,
                )

        logger.info(
            "Withdraw: %s for %s → %s assets=%d shares=%d", caller, owner, receiver, assets, shares
        )
        return shares

    def redeem(self, caller: str, shares: int, receiver: str, owner: str) -> int:
        """Погашение точного количества shares owner'а.

        Returns:
            Количество выплаченных assets
        """
        validate_identity(caller, "caller")
        validate_amount(shares, "shares")
        validate_identity(receiver, "receiver")
        validate_identity(owner, "owner")

        with self._guard:
            self._lifecycle.require_active()
            if shares > self.max_redeem(owner):
                raise self._reject(LimitExceededError("Redeem exceeds max"))

            assets = self._preview(preview_redeem, shares)
            if assets == 0:
                raise self._reject(ValidationError("Zero assets"))

            with self._transaction("redeem"):
                self._burn_for(caller, owner, shares)
                self._push(receiver, assets)
                self._journal.emit(
                    WithdrawEvent,
                    sender=caller,
                    receiver=receiver,
                    owner=owner,
                    assets=assets,
                    shares=shares,
                )

        logger.info(
            "Redeem: %s for %s → %s assets=%d shares=%d", caller, owner, receiver, assets, shares
        )
        return assets

    # =========================================================================
    # SHARE TOKEN
    # =========================================================================

    def transfer(self, caller: str, to: str, amount: int) -> bool:
        validate_identity(caller, "sender")
        validate_identity(to, "receiver")
        validate_amount(amount, "amount", allow_zero=True)

        with self._transaction("transfer"):
            self._ledger.transfer(caller, to, amount)
            self._journal.emit(TransferEvent, sender=caller, recipient=to, value=amount)
        return True

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        validate_identity(caller, "owner")
        validate_identity(spender, "spender")
        validate_amount(amount, "amount", allow_zero=True)

        with self._transaction("approve"):
            self._ledger.approve(caller, spender, amount)
            self._journal.emit(ApprovalEvent, owner=caller, spender=spender, value=amount)
        return True

    def transfer_from(self, caller: str, owner: str, to: str, amount: int) -> bool:
        validate_identity(caller, "spender")
        validate_identity(owner, "owner")
        validate_identity(to, "receiver")
        validate_amount(amount, "amount", allow_zero=True)

        with self._transaction("transfer_from"):
            self._ledger.spend_allowance(owner, caller, amount)
            self._ledger.transfer(owner, to, amount)
            self._journal.emit(TransferEvent, sender=owner, recipient=to, value=amount)
        return True

    # =========================================================================
    # OWNER CONFIGURATION
    # =========================================================================

    def set_deposit_limit(self, caller: str, new_limit: int) -> int:
        """Установка deposit limit.

        Returns:
            Предыдущий лимит

        Raises:
            ValidationError: new_limit ниже текущих total managed assets
        """
        validate_amount(new_limit, "deposit limit", allow_zero=True)
        self._lifecycle.require_owner(caller)

        current = self.total_assets()
        if new_limit < current:
            raise self._reject(
                ValidationError(f"New limit below current assets: {new_limit} < {current}")
            )

        old = self._deposit_limit
        with self._transaction("set_deposit_limit"):
            self._undo.record_attr(self, "_deposit_limit")
            self._deposit_limit = new_limit
            self._journal.emit(DepositLimitUpdatedEvent, old_limit=old, new_limit=new_limit)

        logger.info("Deposit limit updated: %d → %d", old, new_limit)
        return old

    def remove_deposit_limit(self, caller: str) -> int:
        return self.set_deposit_limit(caller, UNLIMITED)

    # =========================================================================
    # ALLOCATIONS
    # =========================================================================

    def allocation_of(self, venue: str) -> int:
        return self._allocations.allocation_of(venue)

    def deployed_to(self, venue: str) -> int:
        return self._allocations.deployed_to(venue)

    def venues(self) -> List[str]:
        return self._allocations.venues()

    def adapter_for(self, venue: str) -> Optional[VenueAdapter]:
        return self._adapters.get(venue)

    def set_allocation(self, caller: str, venue: str, amount: int) -> int:
        """Перезапись аллокации venue.

        Returns:
            Предыдущая аллокация
        """
        venue = validate_venue(venue)
        validate_amount(amount, "allocation", allow_zero=True)
        self._require_allocation_access(caller)

        with self._transaction("set_allocation"):
            old = self._allocations.set_allocation(venue, amount, self.total_assets())
            # Нулевая аллокация неизвестной venue ничего не регистрирует
            if not self._allocations.is_known(venue):
                return old
            self._journal.emit(AllocationChangedEvent, venue=venue, old_amount=old, new_amount=amount)

        logger.info("Allocation %s: %d → %d", venue, old, amount)
        return old

    def set_venue_adapter(self, caller: str, venue: str, adapter: Optional[VenueAdapter]) -> None:
        """Регистрация (или снятие при None) adapter'а для known venue."""
        venue = validate_venue(venue)
        self._lifecycle.require_owner(caller)
        if not self._allocations.is_known(venue):
            raise AllocationError(f"Venue not configured: {venue!r}")

        if adapter is None:
            self._adapters.pop(venue, None)
        else:
            self._adapters[venue] = adapter
        logger.info("Venue adapter %s for %s", "removed" if adapter is None else "set", venue)

    def record_deploy(self, caller: str, venue: str, amount: int) -> int:
        """Деплой amount в venue через его adapter и учёт deployed.

        Returns:
            deployed venue после операции
        """
        venue = validate_venue(venue)
        validate_amount(amount, "amount")
        self._require_allocation_access(caller)

        with self._guard:
            with self._transaction("record_deploy"):
                deployed = self._allocations.record_deploy(venue, amount, self.idle_assets())
                adapter = self._require_adapter(venue)
                if not adapter.deploy(amount):
                    raise TransferFailedError(f"Venue adapter {venue} rejected deploy of {amount}")
                self._journal.emit(VenueDeployedEvent, venue=venue, amount=amount, deployed=deployed)

        logger.info("Deployed %d to %s (deployed=%d)", amount, venue, deployed)
        return deployed

    def record_withdraw(self, caller: str, venue: str, amount: int) -> int:
        """Вывод amount из venue через его adapter и учёт deployed.

        Returns:
            deployed venue после операции
        """
        venue = validate_venue(venue)
        validate_amount(amount, "amount")
        self._require_allocation_access(caller)

        with self._guard:
            with self._transaction("record_withdraw"):
                deployed = self._allocations.record_withdraw(venue, amount)
                adapter = self._require_adapter(venue)
                if not adapter.withdraw(amount):
                    raise TransferFailedError(f"Venue adapter {venue} rejected withdraw of {amount}")
                self._journal.emit(VenueWithdrawnEvent, venue=venue, amount=amount, deployed=deployed)

        logger.info("Withdrew %d from %s (deployed=%d)", amount, venue, deployed)
        return deployed

    def reconcile_venue(self, caller: str, venue: str) -> int:
        """Сверка записанного deployed с балансом, который сообщает adapter.

        Returns:
            deployed venue после сверки

        Raises:
            AllocationError: у venue нет adapter'а с балансом
        """
        venue = validate_venue(venue)
        self._require_allocation_access(caller)

        with self._guard:
            reported = self._require_adapter(venue).balance()
            if reported is None:
                raise AllocationError(f"Venue {venue!r} has no queryable balance")

            with self._transaction("reconcile_venue"):
                old = self._allocations.reconcile(venue, reported)
                self._journal.emit(
                    DeploymentReconciledEvent, venue=venue, old_deployed=old, new_deployed=reported
                )

        if old != reported:
            logger.warning("Venue %s drift: recorded=%d reported=%d", venue, old, reported)
        return reported

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def pause(self, caller: str) -> LifecycleTransitionResult:
        with self._transaction("pause"):
            result = self._lifecycle.pause(caller)
            self._journal.emit(PausedEvent, account=caller)
        return result

    def unpause(self, caller: str) -> LifecycleTransitionResult:
        with self._transaction("unpause"):
            result = self._lifecycle.unpause(caller)
            self._journal.emit(UnpausedEvent, account=caller)
        return result

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._transaction("transfer_ownership"):
            result = self._lifecycle.transfer_ownership(caller, new_owner)
            self._journal.emit(
                OwnershipTransferredEvent,
                previous_owner=result.previous_owner,
                new_owner=result.new_owner,
            )

    def renounce_ownership(self, caller: str) -> None:
        with self._transaction("renounce_ownership"):
            result = self._lifecycle.renounce_ownership(caller)
            self._journal.emit(
                OwnershipTransferredEvent,
                previous_owner=result.previous_owner,
                new_owner=result.new_owner,
            )

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def snapshot(self) -> VaultSnapshot:
        idle = self.idle_assets()
        deployed = self.total_deployed()
        return VaultSnapshot(
            schema_version=SNAPSHOT_SCHEMA_VERSION,
            vault=self.address,
            asset=self._asset_address,
            name=self.name,
            symbol=self.symbol,
            decimals=self._decimals,
            state=self.state,
            owner=self.owner,
            deposit_limit=self._deposit_limit,
            total_assets=idle + deployed,
            idle_assets=idle,
            total_deployed=deployed,
            total_supply=self.total_supply(),
            venues=self._allocations.records(),
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Откат всех изменений операции (по undo log) и журнала при любой ошибке."""
        mark = self._undo.begin()
        journal_length = len(self._journal)
        try:
            yield
        except Exception as e:
            self._undo.rollback(mark)
            self._journal.truncate(journal_length)
            logger.warning("%s rolled back: %s: %s", operation, type(e).__name__, e)
            raise
        else:
            self._undo.commit()

    def _require_adapter(self, venue: str) -> VenueAdapter:
        adapter = self._adapters.get(venue)
        if adapter is None:
            raise AllocationError(f"Venue {venue!r} has no adapter")
        return adapter

    def _require_allocation_access(self, caller: str) -> None:
        self._lifecycle.require_owner(caller)
        if self.config.freeze_allocations_when_paused and self.paused:
            raise PausedError("Allocations are frozen while paused")

    def _preview(self, preview: Callable[[int, ExchangeState], int], amount: int) -> int:
        try:
            return preview(amount, self._exchange_state())
        except ValueError as e:
            raise ValidationError(f"Conversion out of range for {amount}: {e}") from e

    def _reject(self, error: VaultError) -> VaultError:
        logger.debug("Rejected: %s: %s", type(error).__name__, error)
        return error

    def _pull(self, sender: str, assets: int) -> None:
        if not self._asset.transfer_from(self.address, sender, self.address, assets):
            raise TransferFailedError(f"Asset transfer of {assets} from {sender} failed")

    def _push(self, receiver: str, assets: int) -> None:
        if not self._asset.transfer(self.address, receiver, assets):
            raise TransferFailedError(f"Asset transfer of {assets} to {receiver} failed")

    def _mint_shares(self, receiver: str, shares: int) -> None:
        self._ledger.mint(receiver, shares)
        self._journal.emit(TransferEvent, sender=ZERO_ADDRESS, recipient=receiver, value=shares)

    def _burn_for(self, caller: str, owner: str, shares: int) -> None:
        if caller != owner:
            self._ledger.spend_allowance(owner, caller, shares)
        self._ledger.burn(owner, shares)
        self._journal.emit(TransferEvent, sender=owner, recipient=ZERO_ADDRESS, value=shares)
