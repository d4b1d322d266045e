"""
Numerical Safeguards — Safe Integer Math Primitives

Модуль обеспечивает численную корректность всех учётных операций vault:
- Точное целочисленное mul-div с явным направлением округления
- Checked сложение/вычитание в пространстве uint256
- Защита от деления на ноль

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не происходит (ValueError до деления)
2. Промежуточное произведение x * y не теряет точность (Python int)
3. Результат никогда не выходит за [0, UINT256_MAX]
4. Все операции детерминированы и воспроизводимы
"""

from enum import Enum

from src.core.domain.units import UINT256_MAX


# =============================================================================
# ROUNDING
# =============================================================================


class Rounding(str, Enum):
    """
    Направление округления.

    DOWN: floor — получатель никогда не получает больше, чем оправдано
    UP: ceil — плательщик всегда платит не меньше, чем требуется
    """

    DOWN = "DOWN"
    UP = "UP"


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


def require_uint(value: int, name: str = "value") -> int:
    """
    Проверка, что value — целое в [0, UINT256_MAX].

    Raises:
        ValueError: Если значение вне диапазона или не int
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} out of uint256 range: {value}")
    return value


def checked_add(a: int, b: int) -> int:
    """
    Сложение с проверкой переполнения uint256.

    Examples:
        >>> checked_add(1, 2)
        3
    """
    result = require_uint(a, "a") + require_uint(b, "b")
    if result > UINT256_MAX:
        raise ValueError(f"uint256 overflow: {a} + {b}")
    return result


def checked_sub(a: int, b: int) -> int:
    """
    Вычитание с проверкой underflow.

    Examples:
        >>> checked_sub(5, 3)
        2
        >>> checked_sub(3, 5)
        Traceback (most recent call last):
        ...
        ValueError: uint256 underflow: 3 - 5
    """
    require_uint(a, "a")
    require_uint(b, "b")
    if b > a:
        raise ValueError(f"uint256 underflow: {a} - {b}")
    return a - b


def saturating_sub(a: int, b: int) -> int:
    """
    Вычитание с насыщением в 0.

    Используется для capacity-расчётов (limit - current), где отрицательное
    значение означает "ёмкость исчерпана".
    """
    return a - b if a > b else 0


# =============================================================================
# MUL-DIV
# =============================================================================


def ceil_div(numerator: int, denominator: int) -> int:
    """
    Целочисленное деление с округлением вверх.

    Raises:
        ValueError: Если denominator == 0
    """
    if denominator == 0:
        raise ValueError("Division by zero in ceil_div")
    return -(-numerator // denominator)


def mul_div(x: int, y: int, denominator: int, rounding: Rounding = Rounding.DOWN) -> int:
    """
    Точное вычисление x * y / denominator с явным округлением.

    Аналог mulDiv из fixed-point библиотек: промежуточное произведение
    вычисляется без потери точности.

    Args:
        x: Первый множитель (uint)
        y: Второй множитель (uint)
        denominator: Делитель (> 0)
        rounding: Rounding.DOWN (floor) или Rounding.UP (ceil)

    Returns:
        floor(x * y / denominator) или ceil(x * y / denominator)

    Raises:
        ValueError: Если denominator == 0 или результат вне uint256

    Examples:
        >>> mul_div(1, 100, 101)
        0
        >>> mul_div(1, 100, 101, Rounding.UP)
        1
        >>> mul_div(10, 10, 5)
        20
    """
    require_uint(x, "x")
    require_uint(y, "y")
    require_uint(denominator, "denominator")

    if denominator == 0:
        raise ValueError("Division by zero in mul_div")

    product = x * y
    if rounding == Rounding.UP:
        result = ceil_div(product, denominator)
    else:
        result = product // denominator

    if result > UINT256_MAX:
        raise ValueError(f"mul_div result exceeds uint256: {x} * {y} / {denominator}")
    return result
