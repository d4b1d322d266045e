"""Event journal — append-only журнал событий vault."""

import logging
from typing import List, Optional, Tuple, Type, TypeVar

from src.core.contracts.validators import VaultEventValidator
from src.core.domain.events import VaultEvent

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=VaultEvent)


class EventJournal:
    """Журнал событий.

    sequence присваивается журналом и монотонно растёт. Откат транзакции
    усекает журнал до длины на момент её начала; номера откатанных событий
    переиспользуются, поэтому sequence наблюдаемых событий непрерывен.
    """

    def __init__(self, validate: bool = True):
        self._events: List[VaultEvent] = []
        self._validator: Optional[VaultEventValidator] = VaultEventValidator() if validate else None

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> Tuple[VaultEvent, ...]:
        return tuple(self._events)

    def emit(self, event_cls: Type[E], **fields) -> E:
        """Создание и добавление события.

        Raises:
            pydantic.ValidationError: поля не проходят модель
            jsonschema.ValidationError: запись не проходит vault_event.json
        """
        event = event_cls(sequence=len(self._events), **fields)
        if self._validator is not None:
            self._validator.validate(event.model_dump(mode="json"))
        self._events.append(event)
        logger.debug("Event %s #%d: %s", event.event, event.sequence, fields)
        return event

    def of_type(self, event_cls: Type[E]) -> List[E]:
        return [e for e in self._events if isinstance(e, event_cls)]

    def truncate(self, length: int) -> None:
        del self._events[length:]
