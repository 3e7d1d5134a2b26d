"""Deterministic file-set resolution for group definitions."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from topic_tags.groups.filters import ListFilter, filter_out
from topic_tags.groups.models import GroupSpec


def resolve_files(spec: GroupSpec) -> list[Path]:
    """Expand a group's include/exclude rules into absolute, unique paths.

    Pattern includes list regular files directly inside ``base_directory``
    (no recursion) in name order. Explicit lists keep their declared order.
    Exclusion is matched against the same names the include step produced.
    A missing base directory or an empty match yields an empty list.
    """
    base = Path(os.path.abspath(spec.base_directory))
    include = spec.include
    if include is None:
        return []
    if isinstance(include, ListFilter):
        candidates = list(include.names)
    else:
        candidates = [name for name in list_directory(base) if include.matches(name)]

    kept = filter_out(candidates, spec.exclude)
    return dedupe_paths(absolute_path(base, name) for name in kept)


def list_directory(directory: Path) -> list[str]:
    """Return regular file names in directory sorted by name."""
    try:
        with os.scandir(directory) as entries:
            names = [entry.name for entry in entries if entry.is_file()]
    except OSError:
        return []
    return sorted(names)


def dedupe_paths(paths: Iterable[Path]) -> list[Path]:
    """Drop repeated paths keeping first-seen order."""
    seen: set[Path] = set()
    output: list[Path] = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        output.append(path)
    return output


def absolute_path(base: Path, name: str) -> Path:
    """Join name onto base and normalize it lexically.

    Symlinks are not followed, so a linked entry keeps its own name under
    base and two links to one file stay distinct.
    """
    candidate = Path(name).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    return Path(os.path.normpath(candidate))
