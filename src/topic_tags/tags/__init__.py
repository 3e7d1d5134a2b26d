"""Tag grammar, extraction, and navigation."""

from .grammar import (
    CLOSE_DELIMITER,
    OPEN_DELIMITER,
    TAG_PATTERN,
    format_tag_marker,
    format_tag_pattern,
    indexer_regex_rule,
    is_valid_tag_value,
)
from .index import TagIndex, distinct_tags, find_all_tags
from .navigator import (
    GroupSeekUnsupportedError,
    NoMatchError,
    TagOccurrence,
    auto_choose_tag,
    last_match,
    line_bounds,
    next_occurrence,
    previous_occurrence,
    seek_tag_in_group,
    tag_on_current_line,
)

__all__ = [
    "CLOSE_DELIMITER",
    "GroupSeekUnsupportedError",
    "NoMatchError",
    "OPEN_DELIMITER",
    "TAG_PATTERN",
    "TagIndex",
    "TagOccurrence",
    "auto_choose_tag",
    "distinct_tags",
    "find_all_tags",
    "format_tag_marker",
    "format_tag_pattern",
    "indexer_regex_rule",
    "is_valid_tag_value",
    "last_match",
    "line_bounds",
    "next_occurrence",
    "previous_occurrence",
    "seek_tag_in_group",
    "tag_on_current_line",
]
