"""Built-in host commands over groups, tags, and the indexer."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict

from topic_tags.commands.registry import CommandError, CommandHandler, CommandRegistry
from topic_tags.config import ServerConfig
from topic_tags.groups import GroupRegistry, group_spec_from_mapping
from topic_tags.indexer import run_indexer
from topic_tags.logging import CommandAuditLog
from topic_tags.tags import (
    TagIndex,
    TagOccurrence,
    auto_choose_tag,
    find_all_tags,
    line_bounds,
    next_occurrence,
    previous_occurrence,
    seek_tag_in_group,
    tag_on_current_line,
)

DEFAULT_SOURCE = "default"

Search = Callable[..., TagOccurrence | None]


def register_builtin_commands(
    registry: CommandRegistry,
    groups: GroupRegistry,
    tag_index: TagIndex,
    config: ServerConfig,
    audit_log: CommandAuditLog,
) -> None:
    """Register every host-facing command."""
    registry.register("tags.status", _status_handler(groups, tag_index, config))
    registry.register("groups.init", _init_handler(groups))
    registry.register("groups.add", _add_handler(groups, config))
    registry.register("groups.delete", _delete_handler(groups))
    registry.register("groups.select", _select_handler(groups, selected=True))
    registry.register("groups.deselect", _select_handler(groups, selected=False))
    registry.register("groups.selected", _selected_handler(groups))
    registry.register("groups.list", _list_handler(groups))
    registry.register("groups.scan_files", _scan_files_handler(groups))
    registry.register("groups.scan_selected", _scan_selected_handler(groups))
    registry.register("groups.scan_index", _scan_index_handler(groups, config))
    registry.register("groups.index_selected", _index_selected_handler(groups, config))
    registry.register("tags.all_in", _all_in_handler())
    registry.register("tags.rescan", _rescan_handler(tag_index))
    registry.register("tags.current", _current_handler(tag_index))
    registry.register("tags.invalidate", _invalidate_handler(tag_index))
    registry.register("tags.next", _search_handler("tags.next", next_occurrence))
    registry.register("tags.previous", _search_handler("tags.previous", previous_occurrence))
    registry.register("tags.on_line", _on_line_handler())
    registry.register("tags.auto_choose", _auto_choose_handler())
    registry.register("tags.seek_in_group", _seek_in_group_handler(groups))
    registry.register("tags.audit_log", _audit_log_handler(audit_log))


def _status_handler(
    groups: GroupRegistry, tag_index: TagIndex, config: ServerConfig
) -> CommandHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {
            "workspace_root": str(config.workspace_root),
            "groups": list(groups.names()),
            "selected": [group.name for group in groups.selected()],
            "cached_sources": len(tag_index.sources()),
            "effective_config": config.to_public_dict(),
        }

    return handler


def _init_handler(groups: GroupRegistry) -> CommandHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        groups.init()
        return {"groups": []}

    return handler


def _add_handler(groups: GroupRegistry, config: ServerConfig) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        try:
            spec = group_spec_from_mapping(arguments, config.workspace_root, "groups.add")
        except ValueError as error:
            raise CommandError(code="INVALID_PARAMS", message=str(error)) from error
        group = groups.add(spec)
        return {"group": group.to_public_dict(), "files": [str(path) for path in group.files]}

    return handler


def _delete_handler(groups: GroupRegistry) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        name = _require_str(arguments, "name", "groups.delete")
        groups.delete(name)
        return {"deleted": name, "groups": list(groups.names())}

    return handler


def _select_handler(groups: GroupRegistry, selected: bool) -> CommandHandler:
    command = "groups.select" if selected else "groups.deselect"

    def handler(arguments: dict[str, object]) -> dict[str, object]:
        name = _require_str(arguments, "name", command)
        group = groups.select(name) if selected else groups.deselect(name)
        return {"group": group.to_public_dict()}

    return handler


def _selected_handler(groups: GroupRegistry) -> CommandHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {"groups": [group.to_public_dict() for group in groups.selected()]}

    return handler


def _list_handler(groups: GroupRegistry) -> CommandHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        return {"groups": [group.to_public_dict() for group in groups.groups()]}

    return handler


def _scan_files_handler(groups: GroupRegistry) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        name = _require_str(arguments, "name", "groups.scan_files")
        files = groups.scan_group_files(name)
        return {"name": name, "files": [str(path) for path in files]}

    return handler


def _scan_selected_handler(groups: GroupRegistry) -> CommandHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        scanned = groups.scan_selected()
        return {"file_counts": {name: len(files) for name, files in scanned.items()}}

    return handler


def _scan_index_handler(groups: GroupRegistry, config: ServerConfig) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        name = _require_str(arguments, "name", "groups.scan_index")
        result = run_indexer(groups.get(name), config.indexer)
        return asdict(result)

    return handler


def _index_selected_handler(groups: GroupRegistry, config: ServerConfig) -> CommandHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        results = [asdict(run_indexer(group, config.indexer)) for group in groups.selected()]
        return {"results": results}

    return handler


def _all_in_handler() -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        text = _require_text(arguments, "tags.all_in")
        return {"tags": find_all_tags(text)}

    return handler


def _rescan_handler(tag_index: TagIndex) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        text = _require_text(arguments, "tags.rescan")
        source = _optional_str(arguments, "source", "tags.rescan") or DEFAULT_SOURCE
        return {"source": source, "tags": list(tag_index.rescan(source, text))}

    return handler


def _current_handler(tag_index: TagIndex) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        text = _require_text(arguments, "tags.current")
        source = _optional_str(arguments, "source", "tags.current") or DEFAULT_SOURCE
        return {"source": source, "tags": list(tag_index.current(source, text))}

    return handler


def _invalidate_handler(tag_index: TagIndex) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        source = _optional_str(arguments, "source", "tags.invalidate") or DEFAULT_SOURCE
        was_cached = tag_index.cached(source) is not None
        tag_index.invalidate(source)
        return {"source": source, "invalidated": was_cached}

    return handler


def _search_handler(command: str, search: Search) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        text = _require_text(arguments, command)
        tag = _require_str(arguments, "tag", command)
        cursor = _optional_int(arguments, "cursor", command)
        bound = _optional_int(arguments, "bound", command)
        try:
            occurrence = search(
                text,
                0 if cursor is None else cursor,
                tag,
                no_error=_optional_bool(arguments, "no_error", command),
                no_wrap=_optional_bool(arguments, "no_wrap", command),
                bound=bound,
            )
        except ValueError as error:
            raise CommandError(code="INVALID_PARAMS", message=str(error)) from error
        return {"occurrence": asdict(occurrence) if occurrence is not None else None}

    return handler


def _on_line_handler() -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        text = _require_text(arguments, "tags.on_line")
        cursor = _optional_int(arguments, "cursor", "tags.on_line") or 0
        line_start, line_end = line_bounds(text, cursor)
        return {"tag": tag_on_current_line(text, line_start, line_end)}

    return handler


def _auto_choose_handler() -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        text = _require_text(arguments, "tags.auto_choose")
        cursor = _optional_int(arguments, "cursor", "tags.auto_choose") or 0
        return {"tag": auto_choose_tag(text, cursor)}

    return handler


def _seek_in_group_handler(groups: GroupRegistry) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        name = _require_str(arguments, "name", "tags.seek_in_group")
        tag = _require_str(arguments, "tag", "tags.seek_in_group")
        group = groups.get(name)
        return asdict(seek_tag_in_group(group.name, tag))

    return handler


def _audit_log_handler(audit_log: CommandAuditLog) -> CommandHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        limit = _optional_int(arguments, "limit", "tags.audit_log")
        entries = audit_log.tail(
            since=_optional_str(arguments, "since", "tags.audit_log"),
            limit=50 if limit is None else limit,
            command=_optional_str(arguments, "command", "tags.audit_log"),
            group=_optional_str(arguments, "group", "tags.audit_log"),
        )
        return {"entries": entries}

    return handler


def _require_text(arguments: dict[str, object], command: str) -> str:
    value = arguments.get("text")
    if not isinstance(value, str):
        raise CommandError(code="INVALID_PARAMS", message=f"{command} text must be a string.")
    return value


def _require_str(arguments: dict[str, object], key: str, command: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise CommandError(
            code="INVALID_PARAMS",
            message=f"{command} {key} must be a non-empty string.",
        )
    return value


def _optional_str(arguments: dict[str, object], key: str, command: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise CommandError(code="INVALID_PARAMS", message=f"{command} {key} must be a string.")
    return value


def _optional_int(arguments: dict[str, object], key: str, command: str) -> int | None:
    value = arguments.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CommandError(
            code="INVALID_PARAMS",
            message=f"{command} {key} must be a non-negative integer.",
        )
    return value


def _optional_bool(arguments: dict[str, object], key: str, command: str) -> bool:
    value = arguments.get(key, False)
    if not isinstance(value, bool):
        raise CommandError(code="INVALID_PARAMS", message=f"{command} {key} must be a boolean.")
    return value
