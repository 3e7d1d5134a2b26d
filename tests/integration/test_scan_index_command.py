from __future__ import annotations

import sys
from pathlib import Path

import pytest

from topic_tags.config import CliOverrides
from topic_tags.server import create_server


def _fake_indexer(directory: Path, exit_code: int) -> Path:
    script = directory / f"fake-indexer-{exit_code}"
    script.write_text(
        "\n".join(
            [
                f"#!{sys.executable}",
                "import sys",
                "output = sys.argv[1].split('=', 1)[1]",
                "open(output, 'w').write('\\n'.join(sys.argv[1:]))",
                f"sys.exit({exit_code})",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    return script


def _notes_server(tmp_path: Path, program: str):
    notes = tmp_path / "notes"
    notes.mkdir()
    (notes / "a.txt").write_text("<: a :>\n", encoding="utf-8")
    (notes / "b.txt").write_text("<: b :>\n", encoding="utf-8")
    server = create_server(
        root=str(tmp_path),
        cli_overrides=CliOverrides(indexer_program=program),
    )
    server.handle_request(
        {
            "id": "add",
            "method": "groups.add",
            "params": {
                "name": "notes",
                "base_directory": "notes",
                "include": r"\.txt$",
                "index_output_file": "NOTES_TAGS",
                "index_extra_arguments": ["--language=none"],
                "selected": True,
            },
        }
    )
    return server


@pytest.mark.skipif(sys.platform == "win32", reason="relies on a shebang script")
def test_scan_index_runs_indexer_over_group_files(tmp_path: Path) -> None:
    server = _notes_server(tmp_path, str(_fake_indexer(tmp_path, 0)))

    response = server.handle_request(
        {"id": "i1", "method": "groups.scan_index", "params": {"name": "notes"}}
    )

    assert response["ok"] is True
    result = response["result"]
    output = tmp_path.resolve() / "notes" / "NOTES_TAGS"
    assert result["group_name"] == "notes"
    assert result["file_count"] == 2
    assert result["output_path"] == str(output)
    arguments = output.read_text(encoding="utf-8").splitlines()
    assert arguments[0] == f"--output={output}"
    assert arguments[1].startswith("--regex=/<:")
    assert arguments[2:] == [
        "--language=none",
        str(output.parent / "a.txt"),
        str(output.parent / "b.txt"),
    ]

    bulk = server.handle_request({"id": "i2", "method": "groups.index_selected", "params": {}})
    assert [item["group_name"] for item in bulk["result"]["results"]] == ["notes"]


@pytest.mark.skipif(sys.platform == "win32", reason="relies on a shebang script")
def test_scan_index_reports_nonzero_exit(tmp_path: Path) -> None:
    server = _notes_server(tmp_path, str(_fake_indexer(tmp_path, 1)))

    response = server.handle_request(
        {"id": "i3", "method": "groups.scan_index", "params": {"name": "notes"}}
    )

    assert response["ok"] is False
    assert response["error"]["code"] == "INDEXER_FAILED"
    assert "notes" in response["error"]["message"]


def test_scan_index_reports_missing_executable(tmp_path: Path) -> None:
    server = _notes_server(tmp_path, str(tmp_path / "absent-indexer"))

    response = server.handle_request(
        {"id": "i4", "method": "groups.scan_index", "params": {"name": "notes"}}
    )

    assert response["ok"] is False
    assert response["error"]["code"] == "INDEXER_LAUNCH_FAILED"


def test_scan_index_unknown_group(tmp_path: Path) -> None:
    server = _notes_server(tmp_path, "etags")

    response = server.handle_request(
        {"id": "i5", "method": "groups.scan_index", "params": {"name": "ghost"}}
    )

    assert response["error"]["code"] == "GROUP_NOT_FOUND"
