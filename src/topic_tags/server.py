"""JSON-lines command server and the ``topic-tags`` entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from topic_tags.commands import CommandError, CommandRegistry
from topic_tags.commands.builtin import register_builtin_commands
from topic_tags.config import CliOverrides, ServerConfig, load_effective_config
from topic_tags.groups import GroupNotFoundError, GroupRegistry
from topic_tags.indexer import IndexerFailedError, IndexerLaunchError
from topic_tags.logging import CommandAuditLog, build_audit_event
from topic_tags.tags import GroupSeekUnsupportedError, NoMatchError, TagIndex

AUDIT_FILE_NAME = "audit.jsonl"
UNPARSED_LINE = "(unparsed line)"
MALFORMED_REQUEST = "(malformed request)"


@dataclass(slots=True, frozen=True)
class CommandRequest:
    """One host request: a command name and its arguments."""

    request_id: str
    command: str
    arguments: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="topic-tags",
        description="Serve topic tag and group commands over JSON lines on stdin/stdout.",
    )
    parser.add_argument("--root", default=".", help="workspace holding topic_tags.toml")
    parser.add_argument("--data-dir", default=None, help="directory for the audit log")
    parser.add_argument("--indexer-program", default=None)
    parser.add_argument("--indexer-timeout", type=int, default=None, metavar="SECONDS")
    return parser


class CommandServer:
    """Runs host commands against one group registry and one tag index.

    Requests are processed one at a time, so registry mutations never
    interleave. Every request, including one that cannot be parsed, leaves
    one event in the audit log.
    """

    def __init__(self, config: ServerConfig) -> None:
        self._config = config
        self._audit_log = CommandAuditLog(config.data_dir / AUDIT_FILE_NAME)
        self._groups = GroupRegistry()
        for spec in config.groups:
            self._groups.add(spec)
        self._tag_index = TagIndex()
        self._commands = CommandRegistry()
        register_builtin_commands(
            self._commands,
            groups=self._groups,
            tag_index=self._tag_index,
            config=config,
            audit_log=self._audit_log,
        )
        self._generated_ids = 0

    @property
    def groups(self) -> GroupRegistry:
        return self._groups

    @property
    def tag_index(self) -> TagIndex:
        return self._tag_index

    @property
    def audit_log(self) -> CommandAuditLog:
        return self._audit_log

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Answer each non-blank input line with exactly one output line."""
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_line(line)
            out_stream.write(json.dumps(response, sort_keys=True) + "\n")
            out_stream.flush()

    def handle_line(self, line: str) -> dict[str, object]:
        try:
            payload = json.loads(line)
        except json.JSONDecodeError:
            return self._finish(
                request_id=self._generate_id(),
                command=UNPARSED_LINE,
                arguments={"line_length": len(line)},
                error=CommandError(code="INVALID_JSON", message="Request must be valid JSON."),
            )
        return self.handle_request(payload)

    def handle_request(self, payload: object) -> dict[str, object]:
        """Run the command named by an already decoded request."""
        try:
            request = self._read_request(payload)
        except CommandError as error:
            request_id = payload.get("id") if isinstance(payload, dict) else None
            return self._finish(
                request_id=self._request_id(request_id),
                command=MALFORMED_REQUEST,
                arguments={},
                error=error,
            )

        try:
            result = self._commands.dispatch(request.command, request.arguments)
        except Exception as error:
            return self._finish(request.request_id, request.command, request.arguments, error=error)
        return self._finish(request.request_id, request.command, request.arguments, result=result)

    def _read_request(self, payload: object) -> CommandRequest:
        if not isinstance(payload, dict):
            raise CommandError(code="INVALID_REQUEST", message="Request must be an object.")
        command = payload.get("method")
        if not isinstance(command, str) or not command:
            raise CommandError(
                code="INVALID_REQUEST",
                message="Request method must name a command.",
            )
        arguments = payload.get("params", {})
        if not isinstance(arguments, dict):
            raise CommandError(code="INVALID_PARAMS", message="Request params must be an object.")
        return CommandRequest(
            request_id=self._request_id(payload.get("id")),
            command=command,
            arguments=arguments,
        )

    def _request_id(self, value: object) -> str:
        if isinstance(value, str) and value:
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return self._generate_id()

    def _generate_id(self) -> str:
        self._generated_ids += 1
        return f"req-{self._generated_ids:06d}"

    def _finish(
        self,
        request_id: str,
        command: str,
        arguments: dict[str, object],
        result: dict[str, object] | None = None,
        error: Exception | None = None,
    ) -> dict[str, object]:
        if error is None:
            response = success_envelope(request_id, result or {})
            error_code = None
        else:
            error_code, message = describe_error(error)
            response = error_envelope(request_id, error_code, message)
        self._audit_log.record(build_audit_event(request_id, command, arguments, error_code))
        return response


def success_envelope(request_id: str, result: dict[str, object]) -> dict[str, object]:
    return {"request_id": request_id, "ok": True, "result": result, "warnings": []}


def error_envelope(request_id: str, code: str, message: str) -> dict[str, object]:
    return {
        "request_id": request_id,
        "ok": False,
        "result": {},
        "warnings": [],
        "error": {"code": code, "message": message},
    }


def describe_error(error: Exception) -> tuple[str, str]:
    """Map a command failure to its envelope code and message."""
    if isinstance(error, CommandError):
        return error.code, error.message
    if isinstance(error, GroupNotFoundError):
        return "GROUP_NOT_FOUND", str(error)
    if isinstance(error, IndexerLaunchError):
        return "INDEXER_LAUNCH_FAILED", str(error)
    if isinstance(error, IndexerFailedError):
        return "INDEXER_FAILED", str(error)
    if isinstance(error, NoMatchError):
        return "NO_MATCH", str(error)
    if isinstance(error, GroupSeekUnsupportedError):
        return "NOT_IMPLEMENTED", str(error)
    return "INTERNAL_ERROR", "Unhandled error while executing command."


def create_server(
    root: str,
    data_dir: str | None = None,
    cli_overrides: CliOverrides | None = None,
) -> CommandServer:
    """Load the workspace configuration and build a server over it."""
    overrides = cli_overrides or CliOverrides()
    if data_dir is not None:
        overrides = CliOverrides(
            data_dir=Path(data_dir).resolve(),
            indexer_program=overrides.indexer_program,
            indexer_timeout_seconds=overrides.indexer_timeout_seconds,
        )
    config = load_effective_config(workspace_root=Path(root).resolve(), overrides=overrides)
    return CommandServer(config=config)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        indexer_program=args.indexer_program,
        indexer_timeout_seconds=args.indexer_timeout,
    )
    server = create_server(root=args.root, cli_overrides=overrides)
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
