from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    """
    Event vocabulary for container mutation and cursor traversal.
    has_next() is side-effect free, so it has no event.
    """

    ITEM_ADDED = "ITEM_ADDED"
    CURSOR_CREATED = "CURSOR_CREATED"
    ELEMENT_YIELDED = "ELEMENT_YIELDED"
    EXHAUSTED_ACCESS = "EXHAUSTED_ACCESS"


@dataclass(frozen=True, slots=True)
class Event:
    """
    A structured, orderable fact emitted by a container or cursor (optionally).

    seq and cursor ids are owned by the sink.
    """

    seq: int
    type: EventType
    cursor: int | None = None
    data: dict[str, Any] = field(default_factory=dict)
