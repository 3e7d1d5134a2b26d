"""Tag marker grammar shared by in-text scanning and the external indexer.

A marker looks like ``<: topic :>``: the opening delimiter, at least one
space or tab, the tag value (a run of non-whitespace characters), at least
one space or tab, and the closing delimiter.
"""

from __future__ import annotations

import re
from typing import Final

OPEN_DELIMITER: Final[str] = "<:"
CLOSE_DELIMITER: Final[str] = ":>"
_GAP_CHARS: Final[str] = " \t"

_GAP: Final[str] = f"[{_GAP_CHARS}]+"
_VALUE: Final[str] = f"[^{_GAP_CHARS}\\n\\r]+"

TAG_PATTERN: Final[re.Pattern[str]] = re.compile(
    f"{re.escape(OPEN_DELIMITER)}{_GAP}({_VALUE}){_GAP}{re.escape(CLOSE_DELIMITER)}"
)


def format_tag_pattern(value: str) -> re.Pattern[str]:
    """Compile a pattern matching the marker for one literal tag value."""
    return re.compile(
        f"{re.escape(OPEN_DELIMITER)}{_GAP}({re.escape(value)}){_GAP}"
        f"{re.escape(CLOSE_DELIMITER)}"
    )


def format_tag_marker(value: str) -> str:
    """Render the canonical marker text for a tag value."""
    return f"{OPEN_DELIMITER} {value} {CLOSE_DELIMITER}"


def is_valid_tag_value(value: str) -> bool:
    """Return True when value can appear inside a marker."""
    return bool(value) and re.fullmatch(_VALUE, value) is not None


def indexer_regex_rule() -> str:
    """Return the ``--regex`` argument for etags-style indexers.

    The rule uses POSIX/Emacs regex syntax, ``/regexp/name/``, and names
    each tag entry after its captured value.
    """
    open_delim = _posix_escape(OPEN_DELIMITER)
    close_delim = _posix_escape(CLOSE_DELIMITER)
    gap = f"[{_GAP_CHARS}]+"
    value = f"[^{_GAP_CHARS}]+"
    return f"/{open_delim}{gap}\\({value}\\){gap}{close_delim}/\\1/"


def _posix_escape(text: str) -> str:
    special = set(".[]*^$\\/")
    return "".join(f"\\{char}" if char in special else char for char in text)
