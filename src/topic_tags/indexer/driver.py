"""External tag indexer invocation over a group's file set."""

from __future__ import annotations

import os
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from topic_tags.config import IndexerConfig
from topic_tags.groups import Group, absolute_path, resolve_files
from topic_tags.tags import indexer_regex_rule

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(slots=True, frozen=True)
class IndexerLaunchError(Exception):
    """Raised when the indexer executable cannot be started."""

    group_name: str
    program: str
    reason: str

    def __str__(self) -> str:
        return (
            f"Could not launch indexer '{self.program}' for group '{self.group_name}': "
            f"{self.reason}"
        )


@dataclass(slots=True, frozen=True)
class IndexerFailedError(Exception):
    """Raised when the indexer runs but does not exit cleanly."""

    group_name: str
    returncode: int | None

    def __str__(self) -> str:
        return f"Indexer failed for group '{self.group_name}' (exit code {self.returncode})."


@dataclass(slots=True, frozen=True)
class IndexerTimeoutError(IndexerFailedError):
    """Raised when the indexer exceeds the configured timeout."""

    timeout_seconds: int = 0

    def __str__(self) -> str:
        return (
            f"Indexer for group '{self.group_name}' timed out after "
            f"{self.timeout_seconds} seconds."
        )


@dataclass(slots=True, frozen=True)
class IndexerInvocation:
    """Program and argument list for one indexer run."""

    program: str
    arguments: tuple[str, ...]
    output_path: Path

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.arguments]


@dataclass(slots=True, frozen=True)
class IndexerRunResult:
    """Outcome of a successful indexer run."""

    group_name: str
    file_count: int
    output_path: str
    program: str
    duration_ms: int


def index_output_path(group: Group, config: IndexerConfig) -> Path:
    """Resolve where the group's index file is written."""
    name = group.spec.index_output_file or config.default_output_file
    return absolute_path(Path(os.path.abspath(group.base_directory)), name)


def build_invocation(group: Group, config: IndexerConfig) -> IndexerInvocation:
    """Build the indexer command line from the group's cached file list."""
    output_path = index_output_path(group, config)
    arguments = (
        f"--output={output_path}",
        f"--regex={indexer_regex_rule()}",
        *group.spec.index_extra_arguments,
        *(str(path) for path in group.files),
    )
    return IndexerInvocation(program=config.program, arguments=arguments, output_path=output_path)


def run_indexer(
    group: Group,
    config: IndexerConfig,
    runner: Runner = subprocess.run,
) -> IndexerRunResult:
    """Refresh the group's files, run the indexer, and check its exit status."""
    group.files = tuple(resolve_files(group.spec))
    invocation = build_invocation(group, config)
    started = time.perf_counter()
    try:
        completed = runner(
            invocation.argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
            timeout=config.timeout_seconds,
        )
    except subprocess.TimeoutExpired as error:
        raise IndexerTimeoutError(
            group_name=group.name,
            returncode=None,
            timeout_seconds=config.timeout_seconds or 0,
        ) from error
    except OSError as error:
        raise IndexerLaunchError(
            group_name=group.name,
            program=invocation.program,
            reason=error.strerror or type(error).__name__,
        ) from error

    if completed.returncode != 0:
        raise IndexerFailedError(group_name=group.name, returncode=completed.returncode)
    return IndexerRunResult(
        group_name=group.name,
        file_count=len(group.files),
        output_path=str(invocation.output_path),
        program=invocation.program,
        duration_ms=int((time.perf_counter() - started) * 1000),
    )
