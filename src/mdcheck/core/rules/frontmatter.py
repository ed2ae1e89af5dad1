"""Front matter rules: presence, syntax, required fields, duplicate terms, future dates"""

import datetime as dt

from pydantic import ValidationError

from mdcheck.core.models import FrontMatter, Issue, ParsedDoc, Severity


def _field_line(doc: ParsedDoc, key: str) -> int | None:
    """1-based file line where a top-level front matter key is set, if found."""
    if not doc.fm_format:
        return None
    sep = ':' if doc.fm_format == 'yaml' else '='
    for i, line in enumerate(doc.raw.splitlines()[1:doc.body_line - 2], start=2):
        head, found, _ = line.partition(sep)
        if found and head.strip().strip('"\'') == key:
            return i
    return None


def _issue(doc: ParsedDoc, rule: str, message: str, line: int | None = None,
           severity: Severity = Severity.error) -> Issue:
    return Issue(path=str(doc.path), line=line, rule=rule, severity=severity, message=message)


def _as_datetime(value) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value if value.tzinfo else value.replace(tzinfo=dt.timezone.utc)
    return dt.datetime.combine(value, dt.time.min, tzinfo=dt.timezone.utc)


def check_frontmatter(doc: ParsedDoc, now: dt.datetime | None = None) -> list[Issue]:
    """Validate the document's front matter block against FrontMatter."""
    if doc.fm_error:
        return [_issue(doc, 'frontmatter-syntax', doc.fm_error, doc.fm_error_line)]
    if doc.fm_format is None:
        return [_issue(doc, 'frontmatter-missing', "no front matter block ('---' or '+++')", 1)]

    try:
        fm = FrontMatter.model_validate(doc.frontmatter)
    except ValidationError as e:
        issues = []
        for err in e.errors():
            key = str(err['loc'][0]) if err['loc'] else ''
            issues.append(_issue(
                doc, 'frontmatter-field',
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}",
                _field_line(doc, key) or 1,
            ))
        return issues

    issues = []
    for kind in ('tags', 'categories'):
        seen: set[str] = set()
        for term in getattr(fm, kind):
            folded = term.strip().casefold()
            if folded in seen:
                issues.append(_issue(
                    doc, 'frontmatter-duplicate-term', f"{kind}: '{term}' listed more than once",
                    _field_line(doc, kind), Severity.warning,
                ))
            seen.add(folded)

    now = now or dt.datetime.now(dt.timezone.utc)
    if not fm.draft and _as_datetime(fm.date) > now:
        issues.append(_issue(
            doc, 'frontmatter-future-date',
            f"date {fm.date.isoformat()} is in the future; page will not be published",
            _field_line(doc, 'date'), Severity.warning,
        ))
    return issues
