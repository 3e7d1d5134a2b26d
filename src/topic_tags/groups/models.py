"""Typed models for group definitions and their resolved state."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from topic_tags.groups.filters import Filter, parse_filter

DEFAULT_GROUP_FORMAT = "text"


@dataclass(slots=True, frozen=True)
class GroupSpec:
    """Declarative group definition as supplied by the embedding application."""

    name: str
    base_directory: Path
    format: str = DEFAULT_GROUP_FORMAT
    include: Filter | None = None
    exclude: Filter | None = None
    description: str | None = None
    index_output_file: str | None = None
    index_extra_arguments: tuple[str, ...] = ()
    selected: bool = False


@dataclass(slots=True)
class Group:
    """Registered group: definition plus mutable selection and file cache."""

    spec: GroupSpec
    selected: bool = False
    files: tuple[Path, ...] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def base_directory(self) -> Path:
        return self.spec.base_directory

    def to_public_dict(self) -> dict[str, object]:
        """Return a serializable snapshot for command responses."""
        spec = self.spec
        return {
            "name": spec.name,
            "base_directory": str(spec.base_directory),
            "format": spec.format,
            "include": spec.include.to_public() if spec.include is not None else None,
            "exclude": spec.exclude.to_public() if spec.exclude is not None else None,
            "description": spec.description,
            "index_output_file": spec.index_output_file,
            "index_extra_arguments": list(spec.index_extra_arguments),
            "selected": self.selected,
            "file_count": len(self.files),
        }


def group_spec_from_mapping(payload: dict[str, object], root: Path, section: str) -> GroupSpec:
    """Validate a mapping of group fields and build a GroupSpec.

    ``base_directory`` is taken relative to ``root`` unless absolute.
    """
    name = payload.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError(f"Config field '{section}.name' must be a non-empty string.")

    raw_base = payload.get("base_directory", ".")
    if not isinstance(raw_base, str) or not raw_base:
        raise ValueError(f"Config field '{section}.base_directory' must be a non-empty string.")
    base_directory = Path(raw_base).expanduser()
    if not base_directory.is_absolute():
        base_directory = root / base_directory

    group_format = payload.get("format", DEFAULT_GROUP_FORMAT)
    if not isinstance(group_format, str) or not group_format:
        raise ValueError(f"Config field '{section}.format' must be a non-empty string.")

    description = payload.get("description")
    if description is not None and not isinstance(description, str):
        raise ValueError(f"Config field '{section}.description' must be a string.")

    output_file = payload.get("index_output_file")
    if output_file is not None and (not isinstance(output_file, str) or not output_file):
        raise ValueError(f"Config field '{section}.index_output_file' must be a non-empty string.")

    raw_extra = payload.get("index_extra_arguments", [])
    if not isinstance(raw_extra, list) or not all(isinstance(item, str) for item in raw_extra):
        raise ValueError(
            f"Config field '{section}.index_extra_arguments' must be a list of strings."
        )

    selected = payload.get("selected", False)
    if not isinstance(selected, bool):
        raise ValueError(f"Config field '{section}.selected' must be a boolean.")

    return GroupSpec(
        name=name,
        base_directory=base_directory,
        format=group_format,
        include=parse_filter(payload.get("include"), f"{section}.include"),
        exclude=parse_filter(payload.get("exclude"), f"{section}.exclude"),
        description=description,
        index_output_file=output_file,
        index_extra_arguments=tuple(raw_extra),
        selected=selected,
    )
