from __future__ import annotations

import json
from pathlib import Path

from topic_tags.server import create_server


def test_audit_log_records_group_and_tag_without_buffer_text(tmp_path: Path) -> None:
    server = create_server(root=str(tmp_path))
    server.handle_request(
        {
            "id": "a1",
            "method": "tags.next",
            "params": {"text": "private <: t :>", "tag": "t", "cursor": 0},
        }
    )
    server.handle_request({"id": "a2", "method": "groups.select", "params": {"name": "ghost"}})

    audit_path = tmp_path / ".topic_tags" / "audit.jsonl"
    events = [json.loads(line) for line in audit_path.read_text(encoding="utf-8").splitlines()]

    assert set(events[0].keys()) == {
        "command",
        "details",
        "error_code",
        "group",
        "ok",
        "request_id",
        "tag",
        "timestamp",
    }
    assert events[0]["command"] == "tags.next"
    assert events[0]["ok"] is True
    assert events[0]["tag"] == "t"
    assert events[0]["group"] is None
    assert events[0]["details"] == {"cursor": 0, "text_length": 15}
    assert "private" not in audit_path.read_text(encoding="utf-8")
    assert events[1]["group"] == "ghost"
    assert events[1]["error_code"] == "GROUP_NOT_FOUND"

    response = server.handle_request(
        {"id": "a3", "method": "tags.audit_log", "params": {"limit": 1}}
    )
    assert [entry["request_id"] for entry in response["result"]["entries"]] == ["a2"]


def test_audit_log_command_filters_by_group_and_command(tmp_path: Path) -> None:
    (tmp_path / "notes").mkdir()
    server = create_server(root=str(tmp_path))
    server.handle_request(
        {
            "id": "b1",
            "method": "groups.add",
            "params": {
                "name": "notes",
                "base_directory": "notes",
                "include": "*.txt",
                "exclude": ["skip.txt"],
            },
        }
    )
    server.handle_request({"id": "b2", "method": "groups.select", "params": {"name": "notes"}})
    server.handle_request({"id": "b3", "method": "groups.list", "params": {}})

    by_group = server.handle_request(
        {"id": "b4", "method": "tags.audit_log", "params": {"group": "notes"}}
    )
    by_command = server.handle_request(
        {"id": "b5", "method": "tags.audit_log", "params": {"command": "groups.add"}}
    )

    assert [entry["request_id"] for entry in by_group["result"]["entries"]] == ["b1", "b2"]
    (added,) = by_command["result"]["entries"]
    assert added["details"] == {
        "base_directory_length": 5,
        "exclude_kind": "list",
        "include_kind": "glob",
    }
