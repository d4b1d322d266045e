"""
Errors — Таксономия ошибок vault

Каждая ошибка несёт kind (VaultErrorKind), чтобы вызывающая сторона могла
различать классы отказов без сопоставления строк.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Любая ошибка означает, что состояние vault не изменилось
2. Ошибки никогда не подавляются и не повторяются автоматически
"""

from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================


class VaultErrorKind(str, Enum):
    """Класс отказа операции."""

    VALIDATION = "VALIDATION"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    PAUSED = "PAUSED"
    ALLOWANCE = "ALLOWANCE"
    ALLOCATION = "ALLOCATION"
    AUTHORIZATION = "AUTHORIZATION"
    REENTRANCY = "REENTRANCY"
    CUSTODY = "CUSTODY"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class VaultError(Exception):
    """Базовая ошибка vault."""

    kind: VaultErrorKind = VaultErrorKind.VALIDATION


class ValidationError(VaultError):
    """Нулевая сумма, null identity, некорректный тип или конфигурация."""

    kind = VaultErrorKind.VALIDATION


class LimitExceededError(VaultError):
    """
    Превышен лимит операции (deposit limit, max_withdraw/max_redeem).

    Вызывающая сторона должна уменьшить сумму или дождаться capacity.
    """

    kind = VaultErrorKind.LIMIT_EXCEEDED


class InsufficientBalanceError(LimitExceededError):
    """Недостаточный баланс shares у отправителя."""


class PausedError(VaultError):
    """Vault на паузе, мутирующие операции запрещены."""

    kind = VaultErrorKind.PAUSED


class AllowanceError(VaultError):
    """Недостаточный allowance у spender."""

    kind = VaultErrorKind.ALLOWANCE


class AllocationError(VaultError):
    """Ошибка учёта аллокаций по venue (owner-facing)."""

    kind = VaultErrorKind.ALLOCATION


class AllocationExceedsAssetsError(AllocationError):
    """Аллокация больше total managed assets."""


class UnknownVenueError(AllocationError):
    """Venue не сконфигурирована (нет ненулевой аллокации)."""


class InsufficientDeployedError(AllocationError):
    """Вывод из venue больше задеплоенной суммы."""


class InsufficientIdleAssetsError(AllocationError):
    """Деплой больше on-hand баланса vault."""


class AuthorizationError(VaultError):
    """Вызов owner-gated операции не владельцем."""

    kind = VaultErrorKind.AUTHORIZATION


class ReentrancyError(VaultError):
    """Вложенный вызов guarded entry point во время выполнения другого."""

    kind = VaultErrorKind.REENTRANCY


class TransferFailedError(VaultError):
    """Внешний asset или venue adapter сообщил об отказе перевода."""

    kind = VaultErrorKind.CUSTODY
