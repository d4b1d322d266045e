"""Конфигурация vault."""

from dataclasses import dataclass

from src.core.domain.units import UNLIMITED


@dataclass(frozen=True)
class VaultConfig:
    """Конфигурация TokenizedVault.

    - name / symbol: метаданные share токена
    - deposit_limit: начальный deposit limit (UNLIMITED = без ограничений)
    - freeze_allocations_when_paused: запрет set_allocation / record_deploy /
      record_withdraw / reconcile_venue во время паузы
    - validate_events: проверка каждой записи журнала против vault_event.json
    """

    name: str = "Vault Share"
    symbol: str = "VSHR"
    deposit_limit: int = UNLIMITED
    freeze_allocations_when_paused: bool = True
    validate_events: bool = True
