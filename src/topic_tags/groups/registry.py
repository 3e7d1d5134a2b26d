"""In-memory group registry owned by the controlling application."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from topic_tags.groups.models import Group, GroupSpec
from topic_tags.groups.resolver import resolve_files


@dataclass(slots=True, frozen=True)
class GroupNotFoundError(Exception):
    """Raised when an operation names a group that is not registered."""

    name: str

    def __str__(self) -> str:
        return f"Unknown group: {self.name}"


@dataclass(slots=True)
class GroupRegistry:
    """Name-keyed group registry preserving insertion order.

    Adding a group under an existing name replaces the previous entry
    outright; nothing is merged.
    """

    _groups: dict[str, Group] = field(default_factory=dict)

    def init(self) -> None:
        """Discard every registered group."""
        self._groups = {}

    @staticmethod
    def create_group(spec: GroupSpec) -> Group:
        """Build a group from its definition and resolve its file set."""
        group = Group(spec=spec, selected=spec.selected)
        group.files = tuple(resolve_files(spec))
        return group

    def add(self, spec: GroupSpec) -> Group:
        """Create a group and register it under ``spec.name``."""
        group = self.create_group(spec)
        self._groups[spec.name] = group
        return group

    def delete(self, name: str) -> None:
        """Remove a group; unknown names are ignored."""
        self._groups.pop(name, None)

    def get(self, name: str) -> Group:
        """Return a registered group or raise GroupNotFoundError."""
        group = self._groups.get(name)
        if group is None:
            raise GroupNotFoundError(name=name)
        return group

    def names(self) -> tuple[str, ...]:
        """Return registered group names in insertion order."""
        return tuple(self._groups.keys())

    def groups(self) -> tuple[Group, ...]:
        return tuple(self._groups.values())

    def select(self, name: str) -> Group:
        group = self.get(name)
        group.selected = True
        return group

    def deselect(self, name: str) -> Group:
        group = self.get(name)
        group.selected = False
        return group

    def selected(self) -> list[Group]:
        """Return selected groups ordered by name."""
        return sorted(
            (group for group in self._groups.values() if group.selected),
            key=lambda group: group.name,
        )

    def scan_group_files(self, name: str) -> tuple[Path, ...]:
        """Re-resolve one group's file set and replace its cached list."""
        group = self.get(name)
        group.files = tuple(resolve_files(group.spec))
        return group.files

    def scan_selected(self) -> dict[str, tuple[Path, ...]]:
        """Re-resolve the file set of every selected group."""
        return {group.name: self.scan_group_files(group.name) for group in self.selected()}

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, name: object) -> bool:
        return name in self._groups
