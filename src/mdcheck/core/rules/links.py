"""Internal link rules: relative files, anchors, permalinks, static assets, ref shortcodes"""

import posixpath
import re
from pathlib import PurePosixPath
from urllib.parse import unquote, urlsplit

from mdcheck.core.models import Issue, ParsedDoc, Severity
from mdcheck.core.parse import MD_EXTENSIONS
from mdcheck.core.site import SiteIndex, normalize_url
from mdcheck.core.utils.tokens import iter_inline


REF_SHORTCODE_RE = re.compile(r'\{\{[<%]\s*(?:rel)?ref\s+"([^"]+)"\s*[>%]\}\}')
EXTERNAL_RE = re.compile(r'^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)')


def _issue(doc: ParsedDoc, rule: str, message: str, body_line: int | None) -> Issue:
    return Issue(path=str(doc.path), line=doc.file_line(body_line), rule=rule,
                 severity=Severity.error, message=message)


def iter_links(doc: ParsedDoc):
    """Yield (kind, target, 0-based body line); kind is 'link' or 'image'."""
    for child, line in iter_inline(doc.tokens):
        if child.type == 'link_open':
            href = child.attrGet('href')
            if href:
                yield 'link', href, line
        elif child.type == 'image':
            src = child.attrGet('src')
            if src:
                yield 'image', src, line


def iter_refs(doc: ParsedDoc):
    """Yield (target, 0-based body line) for every ref/relref shortcode in the body."""
    for m in REF_SHORTCODE_RE.finditer(doc.markdown):
        yield m.group(1), doc.markdown.count('\n', 0, m.start())


def _doc_dir(doc: ParsedDoc) -> str:
    return str(PurePosixPath(doc.rel_path).parent)


def _join(base: str, path: str) -> str:
    """Join a content-relative directory and a link path, normalized, without a leading './'."""
    joined = posixpath.normpath(posixpath.join(base, path))
    return joined.lstrip('/') if joined != '.' else ''


def _resolve_content(doc: ParsedDoc, path: str) -> str:
    """Content-relative path a Markdown file link points at."""
    if path.startswith('/'):
        return _join('', path.lstrip('/'))
    return _join(_doc_dir(doc), path)


def _check_fragment(doc: ParsedDoc, target: ParsedDoc, fragment: str, site: SiteIndex,
                    href: str, line: int | None) -> list[Issue]:
    if fragment and fragment not in site.anchors(target):
        return [_issue(doc, 'anchor-missing', f"'{href}': no heading with id '{fragment}'", line)]
    return []


def check_target(doc: ParsedDoc, kind: str, href: str, line: int | None, site: SiteIndex) -> list[Issue]:
    """Check one link or image target; external URLs are never checked."""
    if EXTERNAL_RE.match(href):
        return []

    parts = urlsplit(href)
    path, fragment = unquote(parts.path), unquote(parts.fragment)
    missing_rule = 'image-missing' if kind == 'image' else 'link-broken'

    if not path:
        return _check_fragment(doc, doc, fragment, site, href, line)

    if PurePosixPath(path).suffix in MD_EXTENSIONS:
        rel = _resolve_content(doc, path)
        target = site.by_rel_path.get(rel)
        if target is None:
            if site.content_exists(rel):
                return []
            return [_issue(doc, missing_rule, f"'{href}': no content file '{rel}'", line)]
        return _check_fragment(doc, target, fragment, site, href, line)

    if path.startswith('/'):
        url = normalize_url(path)
        if url in site.permalinks:
            target = site.by_rel_path.get(site.permalinks[url])
            return _check_fragment(doc, target, fragment, site, href, line) if target else []
        if site.static_exists(path):
            return []
        return [_issue(doc, missing_rule, f"'{href}': no page or static file at '{url}'", line)]

    # relative, non-Markdown: page bundle resource, else a page relative to this page's URL
    rel = _join(_doc_dir(doc), path)
    if (site.content_root / rel).is_file():
        return []
    base = site.url_of.get(doc.rel_path)
    if base:
        url = normalize_url(posixpath.join(base, path))
        if url in site.permalinks:
            target = site.by_rel_path.get(site.permalinks[url])
            return _check_fragment(doc, target, fragment, site, href, line) if target else []
    if site.static_exists('/' + rel):
        return []
    return [_issue(doc, missing_rule, f"'{href}': no file '{rel}'", line)]


def resolve_ref(doc: ParsedDoc, ref: str, site: SiteIndex) -> ParsedDoc | None:
    """Resolve a ref/relref path: content root, then this doc's directory, then unique file name.

    The extension may be left off, as in {{< ref "/posts/b" >}}.
    """
    path = ref.lstrip('/')
    for rel in (_join('', path), _join(_doc_dir(doc), path)):
        for candidate in [rel, *(rel + ext for ext in sorted(MD_EXTENSIONS))]:
            if candidate in site.by_rel_path:
                return site.by_rel_path[candidate]
        for index in ('index.md', '_index.md'):
            bundle = _join(rel, index)
            if bundle in site.by_rel_path:
                return site.by_rel_path[bundle]
    if '/' in path:
        return None
    candidates = site.by_name.get(path, [])
    if not candidates:
        candidates = [r for r in site.by_rel_path
                      if PurePosixPath(r).stem == path and PurePosixPath(r).suffix in MD_EXTENSIONS]
    if len(candidates) == 1:
        return site.by_rel_path[candidates[0]]
    return None


def check_links(doc: ParsedDoc, site: SiteIndex) -> list[Issue]:
    """Every internal link, image, and ref shortcode in doc must resolve."""
    issues: list[Issue] = []
    for kind, href, line in iter_links(doc):
        issues.extend(check_target(doc, kind, href, line, site))

    for ref, line in iter_refs(doc):
        path, _, fragment = ref.partition('#')
        if not path:
            target = doc
        else:
            target = resolve_ref(doc, path, site)
        if target is None:
            issues.append(_issue(doc, 'ref-broken', f"ref '{ref}' does not resolve to a page", line))
            continue
        if fragment and fragment not in site.anchors(target):
            issues.append(_issue(doc, 'anchor-missing', f"ref '{ref}': no heading with id '{fragment}'", line))
    return issues
