from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, Sequence, TypeVar

from iterator_pattern.event_sink import EventSink
from iterator_pattern.events import EventType

T = TypeVar("T")

log = logging.getLogger(__name__)


class CursorExhaustedError(RuntimeError):
    """Raised when next() is called on a cursor whose has_next() is False."""


class SequenceCursor(ABC, Generic[T]):
    """
    Sequential access over an ordered collection.

    Contract:
    - has_next(): True iff position < current length. No side effect.
    - next(): return the element at position and advance by one.
      On an exhausted cursor, raise CursorExhaustedError and leave
      the position unchanged.

    A cursor is single-use and single-threaded. It is also a Python
    iterator, so `for x in cursor` drains it.
    """

    def __init__(self, *, event_sink: EventSink | None = None, cursor_id: int | None = None):
        self._position = 0
        self._event_sink = event_sink
        self.cursor_id = cursor_id

    @property
    def position(self) -> int:
        return self._position

    @abstractmethod
    def _length(self) -> int: ...

    @abstractmethod
    def _current(self) -> T: ...

    @abstractmethod
    def _advance(self) -> None: ...

    def has_next(self) -> bool:
        return self._position < self._length()

    def next(self) -> T:
        if not self.has_next():
            length = self._length()
            if self._event_sink is not None:
                self._event_sink.emit(
                    EventType.EXHAUSTED_ACCESS,
                    cursor=self.cursor_id,
                    position=self._position,
                    length=length,
                )
            log.debug("exhausted access on cursor %s at position %d", self.cursor_id, self._position)
            raise CursorExhaustedError(
                f"cursor exhausted (position={self._position}, length={length})"
            )

        item = self._current()
        position = self._position
        self._advance()
        self._position += 1

        if self._event_sink is not None:
            self._event_sink.emit(
                EventType.ELEMENT_YIELDED,
                cursor=self.cursor_id,
                position=position,
                item=item,
            )
        return item

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if not self.has_next():
            raise StopIteration
        return self.next()


class ListCursor(SequenceCursor[T]):
    """
    Cursor over an indexable sequence.

    Pass the container's own list for live semantics, or a tuple copy
    for a frozen snapshot.
    """

    def __init__(
            self,
            items: Sequence[T],
            *,
            event_sink: EventSink | None = None,
            cursor_id: int | None = None,
    ):
        super().__init__(event_sink=event_sink, cursor_id=cursor_id)
        self._items = items

    def _length(self) -> int:
        return len(self._items)

    def _current(self) -> T:
        return self._items[self._position]

    def _advance(self) -> None:
        pass


@dataclass(slots=True)
class Node(Generic[T]):
    value: T
    next: Node[T] | None = None


class LinkedListCursor(SequenceCursor[T]):
    """
    Cursor walking singly-linked nodes.

    The cursor keeps the node it has already yielded (not the next one), so
    nodes appended to the tail after the cursor reached the end are still
    found. `limit` bounds the traversal to a node count (snapshot semantics);
    None follows the live length reported by `length_of`.
    """

    def __init__(
            self,
            head_of: Callable[[], Node[T] | None],
            length_of: Callable[[], int],
            *,
            limit: int | None = None,
            event_sink: EventSink | None = None,
            cursor_id: int | None = None,
    ):
        super().__init__(event_sink=event_sink, cursor_id=cursor_id)
        self._head_of = head_of
        self._length_of = length_of
        self._limit = limit
        self._last: Node[T] | None = None

    def _length(self) -> int:
        if self._limit is not None:
            return self._limit
        return int(self._length_of())

    def _next_node(self) -> Node[T]:
        node = self._head_of() if self._last is None else self._last.next
        if node is None:
            # length and links disagree
            raise CursorExhaustedError(
                f"cursor exhausted (position={self._position}, length={self._length()})"
            )
        return node

    def _current(self) -> T:
        return self._next_node().value

    def _advance(self) -> None:
        self._last = self._next_node()
