"""Group definitions, filters, file-set resolution, and registry."""

from .filters import (
    Filter,
    GlobFilter,
    ListFilter,
    PatternFilter,
    filter_out,
    matches_filter,
    parse_filter,
)
from .models import DEFAULT_GROUP_FORMAT, Group, GroupSpec, group_spec_from_mapping
from .registry import GroupNotFoundError, GroupRegistry
from .resolver import absolute_path, dedupe_paths, list_directory, resolve_files

__all__ = [
    "DEFAULT_GROUP_FORMAT",
    "absolute_path",
    "Filter",
    "GlobFilter",
    "Group",
    "GroupNotFoundError",
    "GroupRegistry",
    "GroupSpec",
    "ListFilter",
    "PatternFilter",
    "dedupe_paths",
    "filter_out",
    "group_spec_from_mapping",
    "list_directory",
    "matches_filter",
    "parse_filter",
    "resolve_files",
]
