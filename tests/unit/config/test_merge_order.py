from __future__ import annotations

from pathlib import Path

from topic_tags.config import CliOverrides, load_effective_config
from topic_tags.groups import ListFilter, PatternFilter


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config.workspace_root == tmp_path.resolve()
    assert config.data_dir == tmp_path.resolve() / ".topic_tags"
    assert config.indexer.program == "etags"
    assert config.indexer.default_output_file == "TAGS"
    assert config.indexer.timeout_seconds is None
    assert config.groups == ()


def test_config_file_then_overrides(tmp_path: Path) -> None:
    (tmp_path / "topic_tags.toml").write_text(
        "\n".join(
            [
                "[indexer]",
                'program = "ctags-etags"',
                'default_output_file = "TOPICS"',
                "timeout_seconds = 30",
            ]
        ),
        encoding="utf-8",
    )

    from_file = load_effective_config(tmp_path)
    overridden = load_effective_config(
        tmp_path,
        CliOverrides(
            data_dir=tmp_path / "state",
            indexer_program="etags",
            indexer_timeout_seconds=5,
        ),
    )

    assert from_file.indexer.program == "ctags-etags"
    assert from_file.indexer.default_output_file == "TOPICS"
    assert from_file.indexer.timeout_seconds == 30
    assert overridden.indexer.program == "etags"
    assert overridden.indexer.default_output_file == "TOPICS"
    assert overridden.indexer.timeout_seconds == 5
    assert overridden.data_dir == (tmp_path / "state").resolve()


def test_groups_are_parsed_and_later_duplicates_win(tmp_path: Path) -> None:
    (tmp_path / "topic_tags.toml").write_text(
        "\n".join(
            [
                "[[groups]]",
                'name = "notes"',
                'base_directory = "notes"',
                "include = '\\.txt$'",
                "",
                "[[groups]]",
                'name = "lisp"',
                'format = "lisp"',
                'include = ["init.el", "site.el"]',
                "selected = true",
                "",
                "[[groups]]",
                'name = "notes"',
                'base_directory = "journal"',
                "include = '\\.org$'",
                'exclude = ["draft.org"]',
            ]
        ),
        encoding="utf-8",
    )

    config = load_effective_config(tmp_path)

    assert [spec.name for spec in config.groups] == ["lisp", "notes"]
    lisp, notes = config.groups
    assert lisp.include == ListFilter(names=("init.el", "site.el"))
    assert lisp.selected is True
    assert notes.base_directory == tmp_path.resolve() / "journal"
    assert notes.include == PatternFilter(pattern=r"\.org$")
    assert notes.exclude == ListFilter(names=("draft.org",))
    assert config.to_public_dict()["groups"] == ["lisp", "notes"]
