"""Command audit trail kept as one JSON object per line."""

from __future__ import annotations

import json
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from topic_tags.groups import GlobFilter, ListFilter, PatternFilter, parse_filter

_FILTER_KEYS = frozenset({"include", "exclude"})
_LENGTH_ONLY_KEYS = frozenset({"text", "description", "base_directory", "index_output_file"})
_LABEL_KEYS = frozenset({"format", "source", "since", "command"})


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """What one command did, without the buffer text it was given."""

    timestamp: str
    request_id: str
    command: str
    ok: bool
    error_code: str | None = None
    group: str | None = None
    tag: str | None = None
    details: dict[str, object] = field(default_factory=dict)


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_audit_event(
    request_id: str,
    command: str,
    arguments: dict[str, object],
    error_code: str | None = None,
) -> AuditEvent:
    """Lift the group and tag a command targeted out of its arguments.

    Every group command takes the group as ``name``, so that key is recorded
    as the event's group. Everything else is summarized into ``details``.
    """
    group = arguments.get("name")
    tag = arguments.get("tag")
    return AuditEvent(
        timestamp=utc_timestamp(),
        request_id=request_id,
        command=command,
        ok=error_code is None,
        error_code=error_code,
        group=group if isinstance(group, str) else None,
        tag=tag if isinstance(tag, str) else None,
        details=summarize_arguments(arguments),
    )


def summarize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Describe command arguments without copying buffer text or paths.

    Offsets and flags are kept as given. Text and path fields keep only
    their length, filters keep only their kind.
    """
    details: dict[str, object] = {}
    for key in sorted(arguments):
        if key in ("name", "tag") and isinstance(arguments[key], str):
            continue
        value = arguments[key]
        if key in _FILTER_KEYS:
            details[f"{key}_kind"] = filter_kind(value)
        elif key == "index_extra_arguments" and isinstance(value, list):
            details["index_extra_argument_count"] = len(value)
        elif key in _LENGTH_ONLY_KEYS and isinstance(value, str):
            details[f"{key}_length"] = len(value)
        elif key in _LABEL_KEYS and isinstance(value, str):
            details[key] = value
        elif isinstance(value, (bool, int)) or value is None:
            details[key] = value
        else:
            details[f"{key}_type"] = type(value).__name__
    return details


def filter_kind(value: object) -> str:
    """Name the kind of filter a raw include or exclude value becomes."""
    try:
        parsed = parse_filter(value, field="audit")
    except ValueError:
        return "invalid"
    if parsed is None:
        return "none"
    if isinstance(parsed, ListFilter):
        return "list"
    if isinstance(parsed, GlobFilter):
        return "glob"
    if isinstance(parsed, PatternFilter):
        return "regex"
    return "invalid"


class CommandAuditLog:
    """Append-only command audit file with a bounded, filterable tail."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def record(self, event: AuditEvent) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def tail(
        self,
        since: str | None = None,
        limit: int = 50,
        command: str | None = None,
        group: str | None = None,
    ) -> list[dict[str, object]]:
        """Return the newest matching events, oldest first.

        Lines that are not JSON objects are skipped. ``since`` is an
        inclusive lower bound on the ISO timestamp.
        """
        if limit < 1 or not self._path.exists():
            return []
        window: deque[dict[str, object]] = deque(maxlen=limit)
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                event = _decode_line(line)
                if event is None:
                    continue
                if since is not None and str(event.get("timestamp", "")) < since:
                    continue
                if command is not None and event.get("command") != command:
                    continue
                if group is not None and event.get("group") != group:
                    continue
                window.append(event)
        return list(window)


def _decode_line(line: str) -> dict[str, object] | None:
    stripped = line.strip()
    if not stripped:
        return None
    try:
        decoded = json.loads(stripped)
    except json.JSONDecodeError:
        return None
    return decoded if isinstance(decoded, dict) else None
