from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/topic_tags/server.py",
        "src/topic_tags/config.py",
        "src/topic_tags/commands/__init__.py",
        "src/topic_tags/groups/__init__.py",
        "src/topic_tags/tags/__init__.py",
        "src/topic_tags/indexer/__init__.py",
        "src/topic_tags/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
