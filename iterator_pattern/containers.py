from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, Iterator, TypeVar

from iterator_pattern.cursors import LinkedListCursor, ListCursor, Node, SequenceCursor
from iterator_pattern.event_sink import EventSink
from iterator_pattern.events import EventType

T = TypeVar("T")

log = logging.getLogger(__name__)


class MutationPolicy(str, Enum):
    """
    What a cursor sees of items appended after it was created.

    LIVE: the cursor reads the container's own storage, so later appends
          are yielded (even after has_next() has already returned False).
    SNAPSHOT: the cursor is bounded to the items present at creation.
    """

    LIVE = "live"
    SNAPSHOT = "snapshot"


class TraversableContainer(ABC, Generic[T]):
    """
    Owns an ordered, append-only collection and manufactures cursors over it.

    Insertion order is preserved and duplicates are allowed. Every call to
    create_iterator() returns an independent cursor positioned at 0.
    """

    def __init__(
            self,
            *,
            mutation_policy: MutationPolicy = MutationPolicy.LIVE,
            event_sink: EventSink | None = None,
    ):
        self.mutation_policy = MutationPolicy(mutation_policy)
        self._event_sink = event_sink

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def _append(self, item: T) -> None: ...

    @abstractmethod
    def _new_cursor(self, cursor_id: int | None) -> SequenceCursor[T]: ...

    def add(self, item: T) -> None:
        index = len(self)
        self._append(item)
        if self._event_sink is not None:
            self._event_sink.emit(EventType.ITEM_ADDED, index=index, item=item)

    def extend(self, items) -> None:
        for item in items:
            self.add(item)

    def create_iterator(self) -> SequenceCursor[T]:
        cursor_id = self._event_sink.next_cursor_id() if self._event_sink is not None else None
        cursor = self._new_cursor(cursor_id)
        if self._event_sink is not None:
            self._event_sink.emit(
                EventType.CURSOR_CREATED,
                cursor=cursor_id,
                policy=self.mutation_policy.value,
                length=len(self),
            )
        log.debug(
            "created %s cursor %s over %d item(s)",
            self.mutation_policy.value,
            cursor_id,
            len(self),
        )
        return cursor

    def __iter__(self) -> Iterator[T]:
        return self.create_iterator()


class ListContainer(TraversableContainer[T]):
    """Array-backed container (a Python list)."""

    def __init__(
            self,
            *,
            mutation_policy: MutationPolicy = MutationPolicy.LIVE,
            event_sink: EventSink | None = None,
    ):
        super().__init__(mutation_policy=mutation_policy, event_sink=event_sink)
        self._items: list[T] = []

    def __len__(self) -> int:
        return len(self._items)

    def _append(self, item: T) -> None:
        self._items.append(item)

    def _new_cursor(self, cursor_id: int | None) -> SequenceCursor[T]:
        items = self._items if self.mutation_policy == MutationPolicy.LIVE else tuple(self._items)
        return ListCursor(items, event_sink=self._event_sink, cursor_id=cursor_id)


class LinkedListContainer(TraversableContainer[T]):
    """Singly-linked container with head/tail pointers (O(1) append)."""

    def __init__(
            self,
            *,
            mutation_policy: MutationPolicy = MutationPolicy.LIVE,
            event_sink: EventSink | None = None,
    ):
        super().__init__(mutation_policy=mutation_policy, event_sink=event_sink)
        self._head: Node[T] | None = None
        self._tail: Node[T] | None = None
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def _append(self, item: T) -> None:
        node = Node(item)
        if self._tail is None:
            self._head = node
        else:
            self._tail.next = node
        self._tail = node
        self._length += 1

    def _new_cursor(self, cursor_id: int | None) -> SequenceCursor[T]:
        limit = self._length if self.mutation_policy == MutationPolicy.SNAPSHOT else None
        return LinkedListCursor(
            lambda: self._head,
            lambda: self._length,
            limit=limit,
            event_sink=self._event_sink,
            cursor_id=cursor_id,
        )


BACKINGS: dict[str, type[TraversableContainer]] = {
    "array": ListContainer,
    "linked": LinkedListContainer,
}


def make_container(
        backing: str = "array",
        *,
        mutation_policy: MutationPolicy | str = MutationPolicy.LIVE,
        event_sink: EventSink | None = None,
) -> TraversableContainer:
    """Create an empty container of the named backing ("array" or "linked")."""
    cls = BACKINGS.get(backing)
    if cls is None:
        raise ValueError(
            f"unknown backing {backing!r}; expected one of: {', '.join(sorted(BACKINGS))}"
        )
    return cls(mutation_policy=MutationPolicy(mutation_policy), event_sink=event_sink)
