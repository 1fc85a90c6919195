from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from iterator_pattern.events import Event, EventType


class EventSink(ABC):
    """
    Consumer of structured events.
    Containers and cursors must be able to run with event_sink=None (no events).
    """

    @abstractmethod
    def next_cursor_id(self) -> int: ...

    @abstractmethod
    def emit(self, event_type: EventType, cursor: int | None = None, **data: Any) -> None: ...


@dataclass
class InMemoryEventSink(EventSink):
    """
    Simple sink for tests/demos.
    Owns seq numbering and cursor ids so containers stay free of global state.
    """

    events: list[Event] = field(default_factory=list)
    _seq: int = field(default=0, init=False)
    _cursor_ids: int = field(default=0, init=False)

    def next_cursor_id(self) -> int:
        self._cursor_ids += 1
        return self._cursor_ids

    def emit(self, event_type: EventType, cursor: int | None = None, **data: object) -> None:
        self._seq += 1
        self.events.append(
            Event(
                seq=self._seq,
                type=event_type,
                cursor=cursor,
                data=dict(data),
            )
        )

    def of_type(self, event_type: EventType) -> list[Event]:
        return [e for e in self.events if e.type == event_type]
