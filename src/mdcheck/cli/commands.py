"""CLI command implementations"""

import logging
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mdcheck.config import Settings, load_config
from mdcheck.core.models import Severity
from mdcheck.core.pipeline import run_check, run_index
from mdcheck.core.report import format_json, format_text
from mdcheck.core.utils.logging import configure_logging
from mdcheck.crud.database import init_db, make_engine, reset_db
from mdcheck.crud.documents import find_documents, get_terms, term_counts
from mdcheck.crud.models import TermKindEnum


def _fail(msg: str, cause: Exception = None, code: int = 1) -> None:
    """Print a user-friendly error to stderr and exit."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(code)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling; config errors exit 2."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e), code=2)
    # --verbose on the app callback has already configured the logger
    if not logging.getLogger("mdcheck").handlers:
        configure_logging(settings.log_level)
    return settings


def check_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to check")],
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content root used to resolve links")] = None,
    static: Annotated[Optional[str], typer.Option("--static-dir", help="Static asset root served at /")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="text or json")] = None,
    fail_on: Annotated[Optional[str], typer.Option("--fail-on", help="Lowest severity that fails: error or warning")] = None,
    ):
    """Check front matter, internal links, and code fence languages."""
    settings = _settings(overrides={
        "content_dir": content, "static_dir": static,
        "output_format": fmt, "fail_on": fail_on,
    })
    try:
        report = run_check(path, settings)
    except RuntimeError as e:
        _fail(str(e), code=2)

    if settings.output_format == "json":
        typer.echo(format_json(report))
    else:
        typer.echo(format_text(report))

    if report.failed(Severity(settings.fail_on)):
        raise typer.Exit(1)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the index database. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def index_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to index")],
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content root; stored paths are relative to it")] = None,
    prune: Annotated[bool, typer.Option("--prune", help="Drop indexed documents no longer on disk")] = False,
    ):
    """Record front matter (title, date, tags, categories) in the index database."""
    settings = _settings(overrides={"content_dir": content})
    engine = make_engine(settings.db_url)
    init_db(engine)

    try:
        counts, changes = run_index(engine, path, settings, prune=prune)
    except RuntimeError as e:
        _fail(str(e), code=2)
    except Exception as e:
        _fail("Index failed", e)

    for status, doc_path in changes:
        typer.echo(f"  {status}: {doc_path}")
    typer.echo(
        f"Index complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged, "
        f"{counts['skipped']} skipped, "
        f"{counts['pruned']} pruned"
    )


def taxonomy_cmd(
    kind: Annotated[str, typer.Option("--kind", help="tags or categories")] = "tags",
    drafts: Annotated[bool, typer.Option("--drafts", help="Count draft documents too")] = False,
    ):
    """Print each tag (or category) with the number of documents using it."""
    kinds = {"tags": TermKindEnum.tag, "categories": TermKindEnum.category}
    if kind not in kinds:
        _fail(f"--kind must be one of: {', '.join(kinds)}", code=2)
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        rows = term_counts(session, kinds[kind], include_drafts=drafts)
    if not rows:
        typer.echo(f"No {kind} found in index.")
        raise typer.Exit(1)
    width = max(len(term) for term, _ in rows)
    for term, count in rows:
        typer.echo(f"{term:<{width}}  {count}")


def list_cmd(
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only documents with this tag")] = None,
    category: Annotated[Optional[str], typer.Option("--category", help="Only documents in this category")] = None,
    drafts: Annotated[bool, typer.Option("--drafts", help="Include draft documents")] = False,
    ):
    """List indexed documents, newest first."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        docs = find_documents(session, tag=tag, category=category, include_drafts=drafts)
        if not docs:
            typer.echo("No documents found in index.")
            raise typer.Exit(1)
        for doc in docs:
            tags = ", ".join(get_terms(session, doc, TermKindEnum.tag))
            marker = " (draft)" if doc.draft else ""
            typer.echo(f"{doc.date:%Y-%m-%d}  {doc.path}  {doc.title}{marker}" + (f"  [{tags}]" if tags else ""))
