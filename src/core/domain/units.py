"""
Units — Единицы сумм и идентичностей vault

Единственный допустимый способ проверки входных данных:
- amount (целое беззнаковое в пространстве uint256)
- identity (адрес держателя / spender / owner)

Все суммы в vault — целые числа в минимальных единицах asset (wei-подобные).
Float в учёте ЗАПРЕЩЁН: любая дробная часть теряется только через явное
округление в src.core.math.share_math.
"""

from typing import Final, Optional

from .errors import ValidationError


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Верхняя граница uint256
UINT256_MAX: Final[int] = 2**256 - 1

# Sentinel "без ограничений" для deposit limit и max_deposit/max_mint
UNLIMITED: Final[int] = UINT256_MAX

# Нулевая (null) идентичность
ZERO_ADDRESS: Final[str] = "0x" + "00" * 20

# Допустимая точность asset
MAX_DECIMALS: Final[int] = 77


# =============================================================================
# IDENTITIES
# =============================================================================


def is_null_identity(identity: Optional[str]) -> bool:
    """
    Проверка null identity.

    None, пустая строка и ZERO_ADDRESS считаются null.
    """
    if identity is None:
        return True
    if not isinstance(identity, str):
        return False
    stripped = identity.strip()
    return stripped == "" or stripped.lower() == ZERO_ADDRESS


def validate_identity(identity: Optional[str], role: str = "identity") -> str:
    """
    Проверка, что identity задана и не является null.

    Args:
        identity: Адрес / идентификатор участника
        role: Роль для сообщения об ошибке ('receiver', 'owner', ...)

    Returns:
        identity без изменений

    Raises:
        ValidationError: Если identity null или не строка
    """
    if identity is not None and not isinstance(identity, str):
        raise ValidationError(f"{role} must be a string, got {type(identity).__name__}")
    if is_null_identity(identity):
        raise ValidationError(f"{role} is the null identity")
    return identity


# =============================================================================
# AMOUNTS
# =============================================================================


def validate_amount(amount: int, name: str = "amount", allow_zero: bool = False) -> int:
    """
    Проверка суммы в пространстве uint256.

    Args:
        amount: Сумма (int, не bool)
        name: Имя параметра для сообщения об ошибке
        allow_zero: Разрешить 0 (для approve / set_allocation)

    Returns:
        amount без изменений

    Raises:
        ValidationError: Если тип неверный, значение вне [0, UINT256_MAX]
            или 0 при allow_zero=False
    """
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise ValidationError(f"{name} must be an integer, got {type(amount).__name__}")

    if amount < 0:
        raise ValidationError(f"{name} cannot be negative: {amount}")

    if amount > UINT256_MAX:
        raise ValidationError(f"{name} exceeds uint256 range: {amount}")

    if amount == 0 and not allow_zero:
        raise ValidationError(f"Zero {name}")

    return amount


def validate_decimals(decimals: int) -> int:
    """Проверка точности asset (0..MAX_DECIMALS)."""
    if not isinstance(decimals, int) or isinstance(decimals, bool):
        raise ValidationError(f"decimals must be an integer, got {type(decimals).__name__}")
    if decimals < 0 or decimals > MAX_DECIMALS:
        raise ValidationError(f"decimals out of range [0, {MAX_DECIMALS}]: {decimals}")
    return decimals
