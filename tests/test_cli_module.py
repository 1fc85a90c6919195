from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run_module(*args: str) -> subprocess.CompletedProcess[str]:
    cmd = [sys.executable, "-m", "iterator_pattern", *args]
    env = os.environ.copy()
    env["PYTHONPATH"] = str(REPO_ROOT) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        cmd, text=True, capture_output=True, cwd=REPO_ROOT, env=env
    )


def test_cli_help_succeeds() -> None:
    p = _run_module("--help")
    assert p.returncode == 0, p.stderr
    combined = (p.stdout or "") + (p.stderr or "")
    assert "Iterator Pattern" in combined


def test_cli_demo_prints_items_in_order() -> None:
    p = _run_module("run", "--demo")
    assert p.returncode == 0, p.stderr
    assert p.stdout.splitlines() == [
        "cursor 1 [0] Item 1",
        "cursor 1 [1] Item 2",
        "cursor 1 [2] Item 3",
        "cursor 1 exhausted after 3 element(s)",
    ]


def test_cli_demo_with_two_linked_cursors() -> None:
    p = _run_module("run", "--demo", "--backing", "linked", "--cursors", "2")
    assert p.returncode == 0, p.stderr
    lines = p.stdout.splitlines()
    assert "cursor 2 [0] Item 1" in lines
    assert lines[-2:] == [
        "cursor 1 exhausted after 3 element(s)",
        "cursor 2 exhausted after 3 element(s)",
    ]


def test_cli_rejects_demo_and_input_together() -> None:
    sample = REPO_ROOT / "samples" / "demo_container.json"
    p = _run_module("run", "--demo", "--input", str(sample))
    assert p.returncode != 0
    assert "choose exactly one" in (p.stderr or "")


def test_cli_input_empty_container(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"items": []}), encoding="utf-8")
    p = _run_module("run", "--input", str(path))
    assert p.returncode == 0, p.stderr
    assert p.stdout.splitlines() == ["cursor 1 exhausted after 0 element(s)"]


def test_cli_reads_past_the_end_fails_fast(tmp_path: Path) -> None:
    path = tmp_path / "overrun.json"
    path.write_text(
        json.dumps({"items": ["Item 1", "Item 2"], "options": {"reads": 3}}),
        encoding="utf-8",
    )
    p = _run_module("run", "--input", str(path))
    assert p.returncode == 2
    assert "cursor exhausted" in (p.stderr or "")
    assert "cursor 1 EXHAUSTED at position 2 (length=2)" in p.stdout


def test_cli_invalid_spec_exits_2(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"items": [{"nested": True}]}), encoding="utf-8")
    p = _run_module("run", "--input", str(path))
    assert p.returncode == 2
    assert "invalid container spec" in (p.stderr or "")


def test_cli_events_out_then_render(tmp_path: Path) -> None:
    out = tmp_path / "events.json"
    p = _run_module("run", "--demo", "--events-out", str(out))
    assert p.returncode == 0, p.stderr

    stream = json.loads(out.read_text(encoding="utf-8"))
    assert [e["type"] for e in stream].count("ELEMENT_YIELDED") == 3
    assert [e["seq"] for e in stream] == sorted(e["seq"] for e in stream)

    rendered = _run_module("run", "--events", str(out))
    assert rendered.returncode == 0, rendered.stderr
    assert rendered.stdout == p.stdout


def test_cli_debug_logging_goes_to_stderr() -> None:
    p = _run_module("--log-level", "DEBUG", "run", "--demo")
    assert p.returncode == 0, p.stderr
    assert "created live cursor 1" in p.stderr
    assert "iterator_pattern" not in p.stdout


def test_cli_reads_short_of_the_end_reports_stopped(tmp_path: Path) -> None:
    path = tmp_path / "partial.json"
    path.write_text(
        json.dumps({"items": ["a", "b", "c"], "options": {"reads": 2}}),
        encoding="utf-8",
    )
    p = _run_module("run", "--input", str(path))
    assert p.returncode == 0, p.stderr
    assert p.stdout.splitlines()[-1] == "cursor 1 stopped after 2 element(s)"


def test_cli_overrun_summary_says_exhausted(tmp_path: Path) -> None:
    path = tmp_path / "overrun.json"
    path.write_text(
        json.dumps({"items": ["a"], "options": {"reads": 2}}),
        encoding="utf-8",
    )
    p = _run_module("run", "--input", str(path))
    assert p.returncode == 2
    assert p.stdout.splitlines()[-1] == "cursor 1 exhausted after 1 element(s)"


def test_cli_non_utf8_input_exits_2(tmp_path: Path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"items": ["caf\xe9"]}')
    p = _run_module("run", "--input", str(path))
    assert p.returncode == 2
    assert "invalid UTF-8" in (p.stderr or "")
    assert "Traceback" not in (p.stderr or "")
