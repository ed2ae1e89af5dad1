"""Shared fixtures for core unit tests"""

from pathlib import Path

import pytest

from mdcheck.core.parse import parse_file


@pytest.fixture(name="make_doc")
def make_doc_fixture(tmp_path):
    """Write text under tmp_path/content and parse it; returns the ParsedDoc."""
    content = tmp_path / "content"

    def _make(text: str, rel: str = "posts/post.md"):
        path = content / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return parse_file(path, content)

    return _make


@pytest.fixture(name="content_root")
def content_root_fixture(tmp_path) -> Path:
    return tmp_path / "content"
