"""Tag extraction and per-source tag set cache."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field

from topic_tags.tags.grammar import TAG_PATTERN


def find_all_tags(text: str) -> list[str]:
    """Return every tag value in document order, duplicates included."""
    return [match.group(1).strip() for match in TAG_PATTERN.finditer(text)]


def distinct_tags(text: str) -> tuple[str, ...]:
    """Return unique tag values sorted by plain string order."""
    return tuple(sorted(set(find_all_tags(text))))


@dataclass(slots=True)
class TagIndex:
    """Tag sets cached per text source.

    Sources are identified by any hashable key (a path, a buffer id).
    Cached sets are never refreshed implicitly; callers rescan or
    invalidate after editing the text.
    """

    _cache: dict[Hashable, tuple[str, ...]] = field(default_factory=dict)

    def rescan(self, source: Hashable, text: str) -> tuple[str, ...]:
        """Recompute and store the tag set for source."""
        tags = distinct_tags(text)
        self._cache[source] = tags
        return tags

    def current(self, source: Hashable, text: str) -> tuple[str, ...]:
        """Return the cached tag set, scanning text on first use."""
        cached = self._cache.get(source)
        if cached is None:
            return self.rescan(source, text)
        return cached

    def cached(self, source: Hashable) -> tuple[str, ...] | None:
        return self._cache.get(source)

    def invalidate(self, source: Hashable) -> None:
        """Forget the tag set for one source."""
        self._cache.pop(source, None)

    def clear(self) -> None:
        self._cache.clear()

    def sources(self) -> tuple[Hashable, ...]:
        return tuple(self._cache.keys())
