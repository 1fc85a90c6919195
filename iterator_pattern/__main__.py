from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from iterator_pattern.containers import BACKINGS, make_container
from iterator_pattern.cursors import CursorExhaustedError
from iterator_pattern.event_sink import InMemoryEventSink
from iterator_pattern.events import Event, EventType
from iterator_pattern.logging_config import setup_logging
from iterator_pattern.spec_io import (
    InputFormatError,
    build_container,
    dump_event_stream,
    load_container_spec,
    load_event_stream,
)
from iterator_pattern.trace import read_n, traverse_with_trace

log = logging.getLogger(__name__)

DEMO_ITEMS = ["Item 1", "Item 2", "Item 3"]


def _render_text_report(events: list[Event]) -> str:
    """One line per yielded element, then a per-cursor summary in creation order.

    A cursor is reported as exhausted when it hit EXHAUSTED_ACCESS or read every
    item it could see (its creation length for snapshot cursors, every added
    item for live ones); otherwise it is reported as stopped.
    """
    out: list[str] = []
    read_counts: dict[int | None, int] = {}
    visible: dict[int | None, int | None] = {}
    hit_end: set[int | None] = set()
    items_added = 0

    for e in events:
        if e.type == EventType.ITEM_ADDED:
            items_added += 1
        elif e.type == EventType.CURSOR_CREATED:
            read_counts.setdefault(e.cursor, 0)
            # None: live, resolved against the final item count below
            visible[e.cursor] = e.data.get("length") if e.data.get("policy") == "snapshot" else None
        elif e.type == EventType.ELEMENT_YIELDED:
            read_counts[e.cursor] = read_counts.get(e.cursor, 0) + 1
            out.append(f"cursor {e.cursor} [{e.data.get('position')}] {e.data.get('item')}")
        elif e.type == EventType.EXHAUSTED_ACCESS:
            hit_end.add(e.cursor)
            out.append(
                f"cursor {e.cursor} EXHAUSTED at position {e.data.get('position')} "
                f"(length={e.data.get('length')})"
            )

    if not read_counts:
        out.append("(No cursors were created.)")
    for cursor_id, count in read_counts.items():
        length = visible.get(cursor_id)
        if length is None:
            length = items_added
        state = "exhausted" if cursor_id in hit_end or count >= length else "stopped"
        out.append(f"cursor {cursor_id} {state} after {count} element(s)")

    return "\n".join(out) + "\n"


def _write_events(path: str | None, events: list[Event]) -> None:
    if not path:
        return
    Path(path).write_text(json.dumps(dump_event_stream(events), indent=2), encoding="utf-8")


def _cmd_run(args: argparse.Namespace) -> int:
    chosen = sum(1 for v in [bool(args.demo), bool(args.input), bool(args.events)] if v)
    if chosen != 1:
        print("ERROR: choose exactly one of --demo, --input, or --events.", file=sys.stderr)
        return 2

    if args.events:
        try:
            events = load_event_stream(Path(str(args.events)))
        except InputFormatError as e:
            print(f"ERROR: invalid event stream: {e}", file=sys.stderr)
            return 2
        sys.stdout.write(_render_text_report(events))
        return 0

    if args.cursors < 1:
        print("ERROR: --cursors must be >= 1.", file=sys.stderr)
        return 2

    sink = InMemoryEventSink()
    reads: int | None = None

    if args.input:
        try:
            spec = load_container_spec(Path(str(args.input)))
        except InputFormatError as e:
            print(f"ERROR: invalid container spec: {e}", file=sys.stderr)
            return 2
        container = build_container(spec, event_sink=sink)
        reads = spec.options.reads
    else:
        container = make_container(args.backing, event_sink=sink)
        container.extend(DEMO_ITEMS)

    log.info("running %d cursor(s) over %d item(s)", args.cursors, len(container))

    try:
        for _ in range(int(args.cursors)):
            cursor = container.create_iterator()
            if reads is None:
                traverse_with_trace(cursor)
            else:
                read_n(cursor, reads)
    except CursorExhaustedError as e:
        sys.stdout.write(_render_text_report(sink.events))
        _write_events(args.events_out, sink.events)
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    sys.stdout.write(_render_text_report(sink.events))
    _write_events(args.events_out, sink.events)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="iterator_pattern",
        description=(
            "Iterator Pattern: traversal harness.\n"
            "\n"
            "Fills a container, drains cursors over it and prints each yielded element."
        ),
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics on stderr.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Traverse a container and print every yielded element.")
    run.add_argument("--demo", action="store_true", help="Traverse the built-in 'Item 1..3' container.")
    run.add_argument("--input", type=str, help="Traverse the container described by a spec JSON.")
    run.add_argument("--events", type=str, help="Render an existing event stream JSON.")
    run.add_argument(
        "--backing",
        type=str,
        default="array",
        choices=sorted(BACKINGS),
        help="Container backing for --demo.",
    )
    run.add_argument("--cursors", type=int, default=1, help="Number of independent cursors to drain.")
    run.add_argument("--events-out", type=str, default=None, help="Optional: write the event stream JSON here.")
    run.set_defaults(func=_cmd_run)

    return parser


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level))
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
