"""Filename filters used for group include and exclude rules."""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class PatternFilter:
    """Regular expression matched anywhere in a filename."""

    pattern: str

    def matches(self, filename: str) -> bool:
        """Return True when the expression matches somewhere in filename."""
        if not self.pattern:
            return False
        return re.search(self.pattern, filename) is not None

    def to_public(self) -> object:
        return self.pattern


@dataclass(slots=True, frozen=True)
class GlobFilter:
    """Shell-style glob matched against the whole filename."""

    glob: str

    def matches(self, filename: str) -> bool:
        """Return True when filename matches the glob."""
        if not self.glob:
            return False
        return fnmatch.fnmatchcase(filename, self.glob)

    def to_public(self) -> object:
        return {"glob": self.glob}


@dataclass(slots=True, frozen=True)
class ListFilter:
    """Explicit filename list; membership is exact string equality."""

    names: tuple[str, ...]

    def matches(self, filename: str) -> bool:
        """Return True when filename is listed."""
        return filename in self.names

    def to_public(self) -> object:
        return list(self.names)


Filter = PatternFilter | GlobFilter | ListFilter


def matches_filter(filename: str, file_filter: Filter | None) -> bool:
    """Return True when filename is selected by file_filter.

    An absent filter matches nothing, so an absent exclude rule removes
    nothing.
    """
    if file_filter is None:
        return False
    return file_filter.matches(filename)


def filter_out(files: Iterable[str], file_filter: Filter | None) -> list[str]:
    """Drop every entry matched by file_filter, preserving order."""
    return [name for name in files if not matches_filter(name, file_filter)]


def parse_filter(value: object, field: str) -> Filter | None:
    """Build a filter from a config or request value.

    Strings are regular expressions unless they are shell globs such as
    ``*.txt`` that do not compile as one. Lists are explicit filenames,
    and a table with a single ``glob`` or ``regex`` key selects that kind.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value:
            return None
        if _is_regex(value):
            return PatternFilter(pattern=value)
        return GlobFilter(glob=value)
    if isinstance(value, (list, tuple)):
        names: list[str] = []
        for item in value:
            if not isinstance(item, str):
                raise ValueError(f"Filter '{field}' must contain only strings.")
            names.append(item)
        return ListFilter(names=tuple(names))
    if isinstance(value, dict):
        if set(value.keys()) == {"glob"} and isinstance(value["glob"], str):
            return GlobFilter(glob=value["glob"])
        if set(value.keys()) == {"regex"} and isinstance(value["regex"], str):
            _validate_regex(value["regex"], field)
            return PatternFilter(pattern=value["regex"])
        raise ValueError(f"Filter '{field}' table must have exactly one 'glob' or 'regex' string.")
    raise ValueError(f"Filter '{field}' must be a string, a list of strings, or a table.")


def _is_regex(pattern: str) -> bool:
    if pattern.startswith(("*", "?")):
        return False
    try:
        re.compile(pattern)
    except re.error:
        return False
    return True


def _validate_regex(pattern: str, field: str) -> None:
    try:
        re.compile(pattern)
    except re.error as error:
        raise ValueError(f"Filter '{field}' is not a valid regular expression: {error}") from error
