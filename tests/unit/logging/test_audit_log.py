from __future__ import annotations

import json
from pathlib import Path

from topic_tags.logging import (
    AuditEvent,
    CommandAuditLog,
    build_audit_event,
    filter_kind,
    summarize_arguments,
)


def test_summary_keeps_offsets_and_hides_text() -> None:
    details = summarize_arguments(
        {
            "name": "notes",
            "tag": "db",
            "cursor": 12,
            "no_wrap": True,
            "source": "buffer-3",
            "text": "secret buffer contents",
            "description": "private",
            "include": ["a.txt", "b.txt"],
            "exclude": {"glob": "*.bak"},
            "index_extra_arguments": ["--language=none", "--members"],
        }
    )

    assert details == {
        "cursor": 12,
        "description_length": 7,
        "exclude_kind": "glob",
        "include_kind": "list",
        "index_extra_argument_count": 2,
        "no_wrap": True,
        "source": "buffer-3",
        "text_length": 22,
    }


def test_filter_kind_follows_filter_parsing() -> None:
    assert filter_kind("*.txt") == "glob"
    assert filter_kind(r"\.org$") == "regex"
    assert filter_kind({"regex": "x"}) == "regex"
    assert filter_kind(None) == "none"
    assert filter_kind(42) == "invalid"


def test_event_lifts_group_and_tag() -> None:
    event = build_audit_event(
        "r1",
        "groups.scan_index",
        {"name": "notes", "tag": 5},
        error_code="INDEXER_FAILED",
    )

    assert event.group == "notes"
    assert event.tag is None
    assert event.ok is False
    assert event.details == {"tag": 5}


def test_tail_is_bounded_and_filtered(tmp_path: Path) -> None:
    log = CommandAuditLog(tmp_path / "nested" / "audit.jsonl")
    for index, (command, group) in enumerate(
        [("groups.add", "notes"), ("tags.next", None), ("groups.select", "notes")]
    ):
        log.record(
            AuditEvent(
                timestamp=f"2026-01-0{index + 1}T00:00:00.000Z",
                request_id=f"req-{index}",
                command=command,
                ok=True,
                group=group,
            )
        )
    with log.path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n\n[1, 2]\n")

    assert [entry["request_id"] for entry in log.tail(limit=2)] == ["req-1", "req-2"]
    assert [entry["request_id"] for entry in log.tail(since="2026-01-02")] == ["req-1", "req-2"]
    assert [entry["request_id"] for entry in log.tail(group="notes")] == ["req-0", "req-2"]
    assert [entry["request_id"] for entry in log.tail(command="tags.next")] == ["req-1"]
    assert log.tail(limit=0) == []
    first = json.loads(log.path.read_text(encoding="utf-8").splitlines()[0])
    assert list(first) == sorted(first)


def test_tail_of_missing_file_is_empty(tmp_path: Path) -> None:
    assert CommandAuditLog(tmp_path / "audit.jsonl").tail() == []
