"""Fenced code block rules: every fence names a recognized language"""

from typing import Iterable

from mdcheck.core.models import Issue, ParsedDoc, Severity


def fence_language(info: str) -> str:
    """Language word of a fence info string: 'csharp {linenos=true}' -> 'csharp'."""
    info = info.strip()
    if info.startswith('{'):
        # attribute-only form, e.g. ```{.python}
        info = info.strip('{}').strip().lstrip('.')
    return info.split(maxsplit=1)[0].split('{', 1)[0].lower() if info else ''


def check_fences(doc: ParsedDoc, known_languages: Iterable[str]) -> list[Issue]:
    known = {lang.lower() for lang in known_languages}
    issues = []
    for tok in doc.tokens:
        if tok.type != 'fence':
            continue
        line = doc.file_line(tok.map[0] if tok.map else None)
        lang = fence_language(tok.info)
        if not lang:
            issues.append(Issue(
                path=str(doc.path), line=line, rule='fence-no-language', severity=Severity.error,
                message="fenced code block has no language tag",
            ))
        elif lang not in known:
            issues.append(Issue(
                path=str(doc.path), line=line, rule='fence-unknown-language', severity=Severity.warning,
                message=f"unrecognized code block language '{lang}'",
            ))
    return issues
