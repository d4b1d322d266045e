"""Allocation Tracker — учёт аллокаций и задеплоенных сумм по venue.

- Venue попадает в набор known venues при первой ненулевой аллокации
- Набор known venues append-only, порядок регистрации сохраняется
- deployed никогда не становится отрицательным
- Все проверки выполняются до мутации (нет частичных обновлений)

Проверки доступа (owner-only, pause) выполняет vault; трекер получает
total managed assets / idle assets как аргументы.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional

from src.core.domain.errors import (
    AllocationExceedsAssetsError,
    InsufficientDeployedError,
    InsufficientIdleAssetsError,
    UnknownVenueError,
    ValidationError,
)
from src.core.domain.units import validate_amount
from src.core.domain.vault_state import VenueRecord
from src.core.math.numerical_safeguards import checked_add, checked_sub
from src.vault.undo import UndoLog

logger = logging.getLogger(__name__)


@dataclass
class VenueEntry:
    """Изменяемая запись venue внутри трекера."""

    allocated: int = 0
    deployed: int = 0


def validate_venue(venue: str) -> str:
    """Имя venue: непустая строка, интернируется."""
    if not isinstance(venue, str) or not venue.strip():
        raise ValidationError(f"Invalid venue name: {venue!r}")
    return sys.intern(venue)


class AllocationTracker:
    """Таблица venue → (allocated, deployed).

    dict сохраняет порядок вставки, поэтому отдельный список для итерации
    не нужен, а проверка членства O(1).
    """

    def __init__(self, undo: Optional[UndoLog] = None):
        self._undo = undo or UndoLog()
        self._venues: Dict[str, VenueEntry] = {}
        self._total_deployed: int = 0

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def is_known(self, venue: str) -> bool:
        return venue in self._venues

    def venues(self) -> List[str]:
        return list(self._venues)

    def allocation_of(self, venue: str) -> int:
        entry = self._venues.get(venue)
        return entry.allocated if entry else 0

    def deployed_to(self, venue: str) -> int:
        entry = self._venues.get(venue)
        return entry.deployed if entry else 0

    def total_deployed(self) -> int:
        """Сумма deployed по всем known venues."""
        return self._total_deployed

    def records(self) -> List[VenueRecord]:
        return [
            VenueRecord(venue=name, allocated=e.allocated, deployed=e.deployed)
            for name, e in self._venues.items()
        ]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def set_allocation(self, venue: str, amount: int, total_managed_assets: int) -> int:
        """Перезапись аллокации venue.

        Args:
            venue: имя venue
            amount: новая аллокация (0 допустим)
            total_managed_assets: total managed assets на момент вызова

        Returns:
            Предыдущая аллокация

        Raises:
            AllocationExceedsAssetsError: amount > total_managed_assets
        """
        venue = validate_venue(venue)
        validate_amount(amount, "allocation", allow_zero=True)

        if amount > total_managed_assets:
            raise AllocationExceedsAssetsError(
                f"Allocation {amount} for {venue} exceeds managed assets {total_managed_assets}"
            )

        entry = self._venues.get(venue)
        if entry is None:
            if amount == 0:
                return 0
            entry = VenueEntry()
            self._undo.record(self._venues, venue)
            self._venues[venue] = entry
            logger.info("Venue registered: %s", venue)

        old = entry.allocated
        self._undo.record_attr(entry, "allocated")
        entry.allocated = amount
        return old

    def record_deploy(self, venue: str, amount: int, idle_assets: int) -> int:
        """Увеличение deployed venue.

        Returns:
            deployed после операции

        Raises:
            UnknownVenueError: venue не сконфигурирована
            InsufficientIdleAssetsError: amount > idle_assets
        """
        validate_amount(amount, "amount")
        entry = self._require_venue(venue)

        if amount > idle_assets:
            raise InsufficientIdleAssetsError(
                f"Deploy {amount} to {venue} exceeds idle assets {idle_assets}"
            )

        self._set_deployed(entry, entry.deployed + amount, checked_add(self._total_deployed, amount))
        return entry.deployed

    def record_withdraw(self, venue: str, amount: int) -> int:
        """Уменьшение deployed venue.

        Returns:
            deployed после операции

        Raises:
            UnknownVenueError: venue не сконфигурирована
            InsufficientDeployedError: amount > deployed
        """
        validate_amount(amount, "amount")
        entry = self._require_venue(venue)

        if amount > entry.deployed:
            raise InsufficientDeployedError(
                f"Withdraw {amount} from {venue} exceeds deployed {entry.deployed}"
            )

        self._set_deployed(entry, entry.deployed - amount, checked_sub(self._total_deployed, amount))
        return entry.deployed

    def reconcile(self, venue: str, reported_balance: int) -> int:
        """Замена записанного deployed на баланс, сообщённый adapter'ом.

        Returns:
            Предыдущее значение deployed
        """
        validate_amount(reported_balance, "reported balance", allow_zero=True)
        entry = self._require_venue(venue)

        old = entry.deployed
        self._set_deployed(
            entry, reported_balance, checked_add(self._total_deployed - old, reported_balance)
        )
        return old

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _set_deployed(self, entry: VenueEntry, deployed: int, total_deployed: int) -> None:
        self._undo.record_attr(entry, "deployed")
        self._undo.record_attr(self, "_total_deployed")
        entry.deployed = deployed
        self._total_deployed = total_deployed

    def _require_venue(self, venue: str) -> VenueEntry:
        entry = self._venues.get(venue)
        if entry is None:
            raise UnknownVenueError(f"Venue not configured: {venue!r}")
        return entry
