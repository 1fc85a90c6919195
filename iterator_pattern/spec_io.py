from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from iterator_pattern.containers import BACKINGS, MutationPolicy, TraversableContainer, make_container
from iterator_pattern.event_sink import EventSink
from iterator_pattern.events import Event, EventType


class InputFormatError(ValueError):
    """Raised when a container spec or event stream fails validation."""


@dataclass(frozen=True)
class ContainerSpecOptions:
    # "live" or "snapshot"; see MutationPolicy.
    mutation_policy: str = MutationPolicy.LIVE.value
    # Optional: exact number of next() calls to make per cursor, without
    # guarding on has_next(). Reading past the end fails fast.
    reads: int | None = None


@dataclass(frozen=True)
class ContainerSpec:
    backing: str
    items: list[Any]
    options: ContainerSpecOptions = field(default_factory=ContainerSpecOptions)


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise InputFormatError(f"file not found: {path}")
    if not path.is_file():
        raise InputFormatError(f"not a file: {path}")

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise InputFormatError(f"invalid UTF-8 at byte {e.start}: {path}") from e
    except json.JSONDecodeError as e:
        raise InputFormatError(
            f"invalid JSON: {e.msg} (line {e.lineno}, col {e.colno})"
        ) from e


def load_container_spec(path: Path) -> ContainerSpec:
    """Load and validate a container spec.

    Format:
      {
        "backing": "array",            # optional, "array" | "linked"
        "items": ["Item 1", "Item 2"], # may be empty
        "options": {                   # optional
          "mutation_policy": "live",   # "live" | "snapshot"
          "reads": 3                   # int >= 0
        }
      }

    Items may be strings, numbers or booleans; duplicates are allowed.
    """
    raw = _read_json(path)
    if not isinstance(raw, dict):
        raise InputFormatError("root must be a JSON object")

    backing = raw.get("backing", "array")
    if not isinstance(backing, str) or backing not in BACKINGS:
        raise InputFormatError(
            f"backing must be one of: {', '.join(sorted(BACKINGS))} (got {backing!r})"
        )

    items_raw = raw.get("items")
    if not isinstance(items_raw, list):
        raise InputFormatError("items must be an array")
    items: list[Any] = []
    for i, item in enumerate(items_raw):
        if not isinstance(item, (str, int, float, bool)):
            raise InputFormatError(f"items[{i}] must be a string, number or boolean")
        items.append(item)

    options = _parse_options(raw.get("options", {}))
    return ContainerSpec(backing=backing, items=items, options=options)


def _parse_options(raw: object) -> ContainerSpecOptions:
    if raw is None:
        return ContainerSpecOptions()
    if not isinstance(raw, dict):
        raise InputFormatError("options must be an object")

    policy = raw.get("mutation_policy", MutationPolicy.LIVE.value)
    allowed = [p.value for p in MutationPolicy]
    if not isinstance(policy, str) or policy not in allowed:
        raise InputFormatError(
            f"options.mutation_policy must be one of: {', '.join(allowed)}"
        )

    reads = raw.get("reads", None)
    if reads is not None:
        # bool is an int subclass; reject it explicitly
        if isinstance(reads, bool) or not isinstance(reads, int) or reads < 0:
            raise InputFormatError("options.reads must be an int >= 0 when provided")

    return ContainerSpecOptions(mutation_policy=policy, reads=reads)


def build_container(spec: ContainerSpec, event_sink: EventSink | None = None) -> TraversableContainer:
    container = make_container(
        spec.backing,
        mutation_policy=spec.options.mutation_policy,
        event_sink=event_sink,
    )
    container.extend(spec.items)
    return container


def load_event_stream(path: Path) -> list[Event]:
    """Load and validate an ordered structured event stream from JSON."""
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise InputFormatError("root must be a JSON array of events")

    events: list[Event] = []
    last_seq: int | None = None

    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise InputFormatError(f"event[{i}] must be an object")

        seq = item.get("seq")
        etype = item.get("type")
        cursor = item.get("cursor", None)
        data = item.get("data", {})

        if isinstance(seq, bool) or not isinstance(seq, int) or seq < 1:
            raise InputFormatError(f"event[{i}].seq must be an int >= 1")
        if not isinstance(etype, str):
            raise InputFormatError(f"event[{i}].type must be a string")
        if cursor is not None and (isinstance(cursor, bool) or not isinstance(cursor, int)):
            raise InputFormatError(f"event[{i}].cursor must be an int or null")
        if not isinstance(data, dict):
            raise InputFormatError(f"event[{i}].data must be an object")

        try:
            event_type = EventType(etype)
        except ValueError as e:
            raise InputFormatError(
                f"event[{i}].type is not a valid EventType: {etype!r}"
            ) from e

        if last_seq is not None and seq <= last_seq:
            raise InputFormatError(
                "events must be strictly increasing by seq; "
                f"event[{i}] has seq={seq} after {last_seq}"
            )
        last_seq = seq

        events.append(Event(seq=seq, type=event_type, cursor=cursor, data=data))

    return events


def dump_event_stream(events: list[Event]) -> list[dict[str, Any]]:
    """Return a JSON-serializable event stream."""
    out: list[dict[str, Any]] = []
    for e in events:
        d = asdict(e)
        d["type"] = str(e.type.value)
        out.append(d)
    return out
