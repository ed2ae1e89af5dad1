"""Pipeline step functions: check and index orchestration"""

import datetime as dt
import logging
from pathlib import Path

from sqlmodel import Session

from mdcheck.config import Settings
from mdcheck.core.models import Issue, LintReport, ParsedDoc, Severity
from mdcheck.core.parse import discover_files, parse_file, relative_path
from mdcheck.core.rules.fences import check_fences
from mdcheck.core.rules.frontmatter import check_frontmatter
from mdcheck.core.rules.links import check_links
from mdcheck.core.site import build_site_index
from mdcheck.crud.documents import commit_doc, prune_missing


logger = logging.getLogger(__name__)


def _parse_all(files: list[Path], content_root: Path, parser_config: str) -> tuple[list[ParsedDoc], list[Issue]]:
    """Parse files, turning undecodable ones into 'encoding' issues."""
    docs, issues = [], []
    for p in files:
        try:
            docs.append(parse_file(p, content_root, parser_config))
        except UnicodeDecodeError as e:
            logger.debug("cannot decode %s: %s", p, e)
            issues.append(Issue(path=str(p), rule='encoding', severity=Severity.error,
                                message=f"not valid UTF-8: {e.reason} at byte {e.start}"))
        except OSError as e:
            raise RuntimeError(f"Failed to read {p}: {e}") from e
    return docs, issues


def run_check(path: str, settings: Settings, now: dt.datetime | None = None) -> LintReport:
    """Check every Markdown file under path against the whole content tree.

    The site index always covers settings.content_dir (when it exists) so that
    links from a single checked file into the rest of the tree still resolve.
    """
    target = Path(path)
    if not target.exists():
        raise RuntimeError(f"Path not found: {path}")

    content_root = Path(settings.content_dir)
    if not content_root.is_dir():
        content_root = target if target.is_dir() else target.parent
    static_dir = Path(settings.static_dir)

    checked = discover_files(target)
    checked_keys = {relative_path(p, content_root) for p in checked}
    tree = [p for p in discover_files(content_root) if relative_path(p, content_root) not in checked_keys]

    docs, parse_issues = _parse_all(checked + tree, content_root, settings.parser_config)
    checked_paths = {str(p) for p in checked}
    disabled = set(settings.disabled_rules)
    issues = [i for i in parse_issues if i.path in checked_paths and i.rule not in disabled]
    site = build_site_index(docs, content_root, static_dir, settings.permalink)
    logger.info("checking %d file(s) under %s (content root %s)", len(checked), target, content_root)

    for doc in docs:
        if doc.rel_path not in checked_keys:
            continue
        found: list[Issue] = []
        if "frontmatter" not in disabled:
            found += check_frontmatter(doc, now)
        if "links" not in disabled:
            found += check_links(doc, site)
        if "fences" not in disabled:
            found += check_fences(doc, settings.known_languages)
        issues += [i for i in found if i.rule not in disabled]
        logger.debug("%s: %d issue(s)", doc.rel_path, len(found))

    issues.sort(key=lambda i: (i.path, i.line or 0, i.rule))
    return LintReport(files=len(checked), issues=issues)


def run_index(
    engine,
    path: str,
    settings: Settings,
    prune: bool = False,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Parse files under path and upsert their front matter into the database.

    Returns (counts, changes) where changes is a list of (status, path) for
    created/updated/skipped/pruned docs. Files whose front matter does not
    validate are counted as 'skipped'.
    """
    target = Path(path)
    if not target.exists():
        raise RuntimeError(f"Path not found: {path}")
    content_root = Path(settings.content_dir)
    if not content_root.is_dir():
        content_root = target if target.is_dir() else target.parent

    docs, bad = _parse_all(discover_files(target), content_root, settings.parser_config)
    counts = {"created": 0, "updated": 0, "unchanged": 0, "skipped": len(bad), "pruned": 0}
    changes = [("skipped", i.path) for i in bad]

    with Session(engine) as session:
        for doc in docs:
            row, status = commit_doc(session, doc)
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, doc.rel_path))
        if prune:
            removed = prune_missing(session, {d.rel_path for d in docs}, prefix=relative_path(target, content_root))
            counts["pruned"] = len(removed)
            changes += [("pruned", p) for p in removed]
        session.commit()
    logger.info("indexed %d file(s): %s", len(docs), counts)
    return counts, changes
