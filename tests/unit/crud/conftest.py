"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdcheck.core.parse import parse_file


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="parsed")
def parsed_fixture(tmp_path):
    """Write a content file and parse it; returns the ParsedDoc."""
    content = tmp_path / "content"

    def _parsed(rel: str, title: str = "T", date: str = "2020-01-01", tags=(), categories=(), draft=False, body=""):
        path = content / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            f"---\ntitle: {title}\ndate: {date}\ndraft: {str(draft).lower()}\n"
            f"tags: [{', '.join(tags)}]\ncategories: [{', '.join(categories)}]\n---\n{body}",
            encoding="utf-8",
        )
        return parse_file(path, content)

    return _parsed
