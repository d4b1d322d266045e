"""Undo log — откат транзакций vault по затронутым ключам.

Перед мутацией компонент записывает прежнее значение ключа (или атрибута).
Откат восстанавливает записи в обратном порядке до отметки начала
транзакции. Стоимость пропорциональна числу изменённых ключей, а не
размеру ledger.

Вложенные транзакции разделяют один журнал: commit внутренней оставляет
её записи, чтобы откат внешней вернул и их. Журнал очищается, когда
завершается самая внешняя транзакция.
"""

from typing import Any, Callable, Dict, Hashable, List


class UndoLog:
    """Журнал отката, общий для ledger, трекера аллокаций и lifecycle.

    Вне транзакции record* ничего не записывают.
    """

    def __init__(self):
        self._entries: List[Callable[[], None]] = []
        self._depth = 0

    @property
    def active(self) -> bool:
        return self._depth > 0

    def __len__(self) -> int:
        return len(self._entries)

    def begin(self) -> int:
        """Начало транзакции. Returns отметку для rollback."""
        self._depth += 1
        return len(self._entries)

    def commit(self) -> None:
        self._finish()

    def rollback(self, mark: int) -> None:
        """Восстановление всех записей после mark в обратном порядке."""
        while len(self._entries) > mark:
            self._entries.pop()()
        self._finish()

    def record(self, table: Dict[Hashable, Any], key: Hashable) -> None:
        """Запомнить значение table[key] (или его отсутствие)."""
        if not self._depth:
            return
        if key in table:
            previous = table[key]
            self._entries.append(lambda: table.__setitem__(key, previous))
        else:
            self._entries.append(lambda: table.pop(key, None))

    def record_attr(self, obj: Any, name: str) -> None:
        """Запомнить значение атрибута obj.name."""
        if not self._depth:
            return
        previous = getattr(obj, name)
        self._entries.append(lambda: setattr(obj, name, previous))

    def _finish(self) -> None:
        if self._depth == 0:
            raise RuntimeError("No transaction in progress")
        self._depth -= 1
        if self._depth == 0:
            self._entries.clear()
