"""Site index: permalinks, aliases, and heading anchors across the content tree"""

import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from mdcheck.core.models import ParsedDoc
from mdcheck.core.utils.slug import anchorize, slugify
from mdcheck.core.utils.tokens import iter_headings, split_heading_id


logger = logging.getLogger(__name__)

BUNDLE_INDEXES = {'index', '_index'}
TAXONOMIES = ('tags', 'categories')


def normalize_url(path: str) -> str:
    """Collapse a site path to '/a/b/' form; file-like paths keep no trailing slash."""
    path = posixpath.normpath('/' + path.strip().lstrip('/'))
    if path == '/':
        return path
    if PurePosixPath(path).suffix:
        return path
    return path + '/'


def doc_section(rel_path: str) -> str:
    """First directory of a content-relative path, '' for root-level files."""
    parts = PurePosixPath(rel_path).parts
    return parts[0] if len(parts) > 1 else ''


def doc_slug(doc: ParsedDoc) -> str:
    """Front matter slug, else bundle directory name, else file stem."""
    if isinstance(doc.frontmatter.get('slug'), str) and doc.frontmatter['slug'].strip():
        return doc.frontmatter['slug'].strip()
    p = PurePosixPath(doc.rel_path)
    if p.stem in BUNDLE_INDEXES:
        return slugify(p.parent.name) if p.parent.name else ''
    return slugify(p.stem)


def doc_permalink(doc: ParsedDoc, pattern: str) -> str:
    """URL the generator serves the document at."""
    url = doc.frontmatter.get('url')
    if isinstance(url, str) and url.strip():
        return normalize_url(url)
    p = PurePosixPath(doc.rel_path)
    if p.name.startswith('_index.'):
        # section list page lives at the directory itself
        return normalize_url(str(p.parent))
    return normalize_url(pattern.format(section=doc_section(doc.rel_path), slug=doc_slug(doc)))


def doc_anchors(doc: ParsedDoc) -> set[str]:
    """Heading ids in the document, deduplicated with -1, -2 suffixes."""
    anchors: set[str] = set()
    seen: dict[str, int] = {}
    for text, _ in iter_headings(doc.tokens):
        text, explicit = split_heading_id(text)
        if explicit:
            anchors.add(explicit)
            continue
        base = anchorize(text)
        n = seen.get(base, 0)
        seen[base] = n + 1
        anchors.add(base if n == 0 else f"{base}-{n}")
    return anchors


def doc_terms(doc: ParsedDoc, taxonomy: str) -> list[str]:
    """Non-blank terms of one taxonomy; a scalar counts as a one-element list."""
    values = doc.frontmatter.get(taxonomy) or []
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, list):
        return []
    return [v.strip() for v in values if isinstance(v, str) and v.strip()]


def generated_urls(doc: ParsedDoc) -> set[str]:
    """List pages the generator renders without a content file: section and taxonomy pages."""
    urls = set()
    section = doc_section(doc.rel_path)
    if section:
        urls.add(normalize_url(section))
    for taxonomy in TAXONOMIES:
        for term in doc_terms(doc, taxonomy):
            urls.add(normalize_url(f"{taxonomy}/{slugify(term)}"))
    return urls


@dataclass
class SiteIndex:
    """Everything link checks need to know about the tree, built once per run."""
    content_root: Path
    static_dir:   Path
    by_rel_path:  dict[str, ParsedDoc] = field(default_factory=dict)
    permalinks:   dict[str, str] = field(default_factory=dict)     # url -> rel_path
    url_of:       dict[str, str] = field(default_factory=dict)     # rel_path -> url
    by_name:      dict[str, list[str]] = field(default_factory=dict)
    _anchors:     dict[str, set[str]] = field(default_factory=dict)

    def anchors(self, doc: ParsedDoc) -> set[str]:
        if doc.rel_path not in self._anchors:
            self._anchors[doc.rel_path] = doc_anchors(doc)
        return self._anchors[doc.rel_path]

    def static_exists(self, url_path: str) -> bool:
        target = self.static_dir / url_path.lstrip('/')
        return target.is_file() or (target / 'index.html').is_file()

    def content_exists(self, rel_path: str) -> bool:
        return rel_path in self.by_rel_path or (self.content_root / rel_path).is_file()


def build_site_index(docs: list[ParsedDoc], content_root: Path, static_dir: Path, pattern: str) -> SiteIndex:
    """Index docs by content path, file name, permalink, and alias.

    Generated pages (home, sections, taxonomy lists and terms) map to '' since
    no document backs them.
    """
    site = SiteIndex(content_root=content_root, static_dir=static_dir)
    generated = {'/'} | {normalize_url(t) for t in TAXONOMIES}
    for doc in docs:
        site.by_rel_path[doc.rel_path] = doc
        site.by_name.setdefault(PurePosixPath(doc.rel_path).name, []).append(doc.rel_path)

        url = doc_permalink(doc, pattern)
        site.url_of[doc.rel_path] = url
        if url in site.permalinks and site.permalinks[url] != doc.rel_path:
            logger.info("permalink %s claimed by %s and %s", url, site.permalinks[url], doc.rel_path)
        site.permalinks.setdefault(url, doc.rel_path)

        aliases = doc.frontmatter.get('aliases') or []
        if isinstance(aliases, str):
            aliases = [aliases]
        for alias in aliases:
            if isinstance(alias, str) and alias.strip():
                site.permalinks.setdefault(normalize_url(alias), doc.rel_path)
        generated |= generated_urls(doc)

    # an _index.md or a url override claims the address first
    for url in generated:
        site.permalinks.setdefault(url, '')

    logger.debug("site index: %d docs, %d urls", len(site.by_rel_path), len(site.permalinks))
    return site
