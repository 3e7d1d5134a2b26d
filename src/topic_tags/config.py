"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from topic_tags.groups import GroupSpec, group_spec_from_mapping

CONFIG_FILE_NAME = "topic_tags.toml"
DEFAULT_DATA_DIR_NAME = ".topic_tags"
DEFAULT_INDEXER_PROGRAM = "etags"
DEFAULT_INDEX_OUTPUT_FILE = "TAGS"
MAX_INDEXER_TIMEOUT_SECONDS = 24 * 60 * 60


@dataclass(slots=True, frozen=True)
class IndexerConfig:
    """External indexer invocation settings."""

    program: str = DEFAULT_INDEXER_PROGRAM
    default_output_file: str = DEFAULT_INDEX_OUTPUT_FILE
    timeout_seconds: int | None = None


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Fully merged configuration."""

    workspace_root: Path
    data_dir: Path
    indexer: IndexerConfig
    groups: tuple[GroupSpec, ...]

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for command responses."""
        return {
            "workspace_root": str(self.workspace_root),
            "data_dir": str(self.data_dir),
            "indexer": {
                "program": self.indexer.program,
                "default_output_file": self.indexer.default_output_file,
                "timeout_seconds": self.indexer.timeout_seconds,
            },
            "groups": [spec.name for spec in self.groups],
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    indexer_program: str | None = None
    indexer_timeout_seconds: int | None = None


def default_config(workspace_root: Path) -> ServerConfig:
    """Build default config for a given workspace root."""
    resolved_root = workspace_root.resolve()
    return ServerConfig(
        workspace_root=resolved_root,
        data_dir=resolved_root / DEFAULT_DATA_DIR_NAME,
        indexer=IndexerConfig(),
        groups=(),
    )


def load_config_file(workspace_root: Path) -> dict[str, object]:
    """Load optional topic_tags.toml from the workspace root."""
    config_path = workspace_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_non_empty_str(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value:
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value


def _optional_timeout(value: object, name: str, default: int | None) -> int | None:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if value > MAX_INDEXER_TIMEOUT_SECONDS:
        raise ValueError(f"Config field '{name}' must be <= {MAX_INDEXER_TIMEOUT_SECONDS}.")
    return value


def parse_groups(payload: dict[str, object], workspace_root: Path) -> tuple[GroupSpec, ...]:
    """Parse ``[[groups]]`` tables; a repeated name replaces the earlier one."""
    raw_groups = payload.get("groups", [])
    if not isinstance(raw_groups, list):
        raise ValueError("Config section 'groups' must be an array of tables.")
    by_name: dict[str, GroupSpec] = {}
    for position, raw in enumerate(raw_groups):
        if not isinstance(raw, dict):
            raise ValueError(f"Config section 'groups[{position}]' must be a table.")
        spec = group_spec_from_mapping(raw, workspace_root, f"groups[{position}]")
        by_name.pop(spec.name, None)
        by_name[spec.name] = spec
    return tuple(by_name.values())


def merge_config(
    base: ServerConfig, payload: dict[str, object], overrides: CliOverrides
) -> ServerConfig:
    """Merge defaults, config file, then CLI/startup overrides."""
    indexer_payload = _get_table(payload, "indexer")
    indexer = IndexerConfig(
        program=_optional_non_empty_str(
            indexer_payload.get("program"), "indexer.program", base.indexer.program
        ),
        default_output_file=_optional_non_empty_str(
            indexer_payload.get("default_output_file"),
            "indexer.default_output_file",
            base.indexer.default_output_file,
        ),
        timeout_seconds=_optional_timeout(
            indexer_payload.get("timeout_seconds"),
            "indexer.timeout_seconds",
            base.indexer.timeout_seconds,
        ),
    )
    groups = base.groups
    if "groups" in payload:
        groups = parse_groups(payload, base.workspace_root)

    merged = ServerConfig(
        workspace_root=base.workspace_root,
        data_dir=base.data_dir,
        indexer=indexer,
        groups=groups,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ServerConfig, overrides: CliOverrides) -> ServerConfig:
    """Apply startup overrides at highest precedence."""
    indexer = IndexerConfig(
        program=_optional_non_empty_str(
            overrides.indexer_program, "overrides.indexer_program", config.indexer.program
        ),
        default_output_file=config.indexer.default_output_file,
        timeout_seconds=_optional_timeout(
            overrides.indexer_timeout_seconds,
            "overrides.indexer_timeout_seconds",
            config.indexer.timeout_seconds,
        ),
    )
    data_dir = overrides.data_dir or config.data_dir
    return ServerConfig(
        workspace_root=config.workspace_root,
        data_dir=data_dir.resolve(),
        indexer=indexer,
        groups=config.groups,
    )


def load_effective_config(
    workspace_root: Path, overrides: CliOverrides | None = None
) -> ServerConfig:
    """Load effective config using merge order defaults -> file -> overrides."""
    resolved_root = workspace_root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())
