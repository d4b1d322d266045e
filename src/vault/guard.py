"""Reentrancy guard — единственный флаг "операция в процессе"."""

from src.core.domain.errors import ReentrancyError


class ReentrancyGuard:
    """Scoped exclusive-access guard.

    Использование:
        with guard:
            ...  # внешний вызов asset, вложенный вход → ReentrancyError

    Флаг освобождается на любом выходе из блока, включая исключения.
    Вложенный вход не меняет состояние guard.
    """

    def __init__(self):
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    def __enter__(self) -> "ReentrancyGuard":
        if self._entered:
            raise ReentrancyError("Reentrant call")
        self._entered = True
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._entered = False
        return False
