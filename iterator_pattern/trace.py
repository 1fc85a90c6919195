from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from iterator_pattern.cursors import SequenceCursor


@dataclass(frozen=True)
class StepTrace:
    # Position the item was read from (BEFORE the advance).
    position: int
    item: Any
    # has_next() AFTER the advance.
    has_next_after: bool


def traverse_with_trace(cursor: SequenceCursor) -> list[StepTrace]:
    """
    Drain a cursor the well-formed way (guard every next() with has_next()),
    returning a per-step log.

    Does not alter cursor semantics.
    """
    log: list[StepTrace] = []
    while cursor.has_next():
        position = cursor.position
        item = cursor.next()
        log.append(StepTrace(position=position, item=item, has_next_after=cursor.has_next()))
    return log


def read_n(cursor: SequenceCursor, n: int) -> list[StepTrace]:
    """
    Call next() exactly n times without guarding on has_next().

    CursorExhaustedError propagates on the first read past the end; the
    cursor position is left where the last successful read put it.
    """
    log: list[StepTrace] = []
    for _ in range(n):
        position = cursor.position
        item = cursor.next()
        log.append(StepTrace(position=position, item=item, has_next_after=cursor.has_next()))
    return log
