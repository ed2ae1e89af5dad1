"""Unit tests for core/site.py"""

import pytest

from mdcheck.core.site import (
    build_site_index, doc_anchors, doc_permalink, doc_slug, generated_urls, normalize_url,
)


PATTERN = "/{section}/{slug}/"


@pytest.mark.parametrize("path,expected", [
    ("posts/x", "/posts/x/"),
    ("/posts/x/", "/posts/x/"),
    ("//posts//x", "/posts/x/"),
    ("/posts/../projects", "/projects/"),
    ("/images/logo.png", "/images/logo.png"),
    ("/", "/"),
])
def test_normalize_url(path, expected):
    assert normalize_url(path) == expected


def test_slug_from_file_stem(make_doc):
    doc = make_doc("---\ntitle: T\n---\n", "posts/My Post.md")
    assert doc_slug(doc) == "my-post"


def test_slug_from_bundle_directory(make_doc):
    doc = make_doc("---\ntitle: T\n---\n", "posts/value-objects/index.md")
    assert doc_slug(doc) == "value-objects"


def test_slug_from_frontmatter(make_doc):
    doc = make_doc("---\nslug: custom\n---\n", "posts/anything.md")
    assert doc_slug(doc) == "custom"


def test_permalink_uses_section_and_slug(make_doc):
    doc = make_doc("---\ntitle: T\n---\n", "posts/singleton.md")
    assert doc_permalink(doc, PATTERN) == "/posts/singleton/"


def test_permalink_root_level_page(make_doc):
    doc = make_doc("---\ntitle: T\n---\n", "projects.md")
    assert doc_permalink(doc, PATTERN) == "/projects/"


def test_permalink_url_overrides_pattern(make_doc):
    doc = make_doc("---\nurl: /about\n---\n", "posts/about-me.md")
    assert doc_permalink(doc, PATTERN) == "/about/"


def test_permalink_section_index(make_doc):
    doc = make_doc("---\ntitle: Posts\n---\n", "posts/_index.md")
    assert doc_permalink(doc, PATTERN) == "/posts/"


def test_anchors_dedupe_and_explicit_ids(make_doc):
    """Repeated headings get numeric suffixes; {#id} replaces the derived id."""
    doc = make_doc("# Пример\n\n## Пример\n\n## Код {#code}\n", "posts/a.md")
    assert doc_anchors(doc) == {"пример", "пример-1", "code"}


def test_anchors_use_inline_code_text(make_doc):
    doc = make_doc("## Метод `Dispose`\n", "posts/a.md")
    assert doc_anchors(doc) == {"метод-dispose"}


def test_build_site_index_registers_aliases(make_doc, content_root, tmp_path):
    a = make_doc("---\ntitle: A\naliases: [/old/a/, /older/a]\n---\n", "posts/a.md")
    b = make_doc("---\ntitle: B\n---\n", "b.md")
    site = build_site_index([a, b], content_root, tmp_path / "static", PATTERN)
    assert site.permalinks["/posts/a/"] == "posts/a.md"
    assert site.permalinks["/old/a/"] == "posts/a.md"
    assert site.permalinks["/older/a/"] == "posts/a.md"
    assert site.permalinks["/b/"] == "b.md"
    assert site.url_of["b.md"] == "/b/"
    assert site.by_name["a.md"] == ["posts/a.md"]


def test_build_site_index_first_claim_wins(make_doc, content_root, tmp_path):
    a = make_doc("---\nslug: same\n---\n", "posts/a.md")
    b = make_doc("---\nslug: same\n---\n", "posts/b.md")
    site = build_site_index([a, b], content_root, tmp_path / "static", PATTERN)
    assert site.permalinks["/posts/same/"] == "posts/a.md"


def test_generated_urls(make_doc):
    doc = make_doc("---\ntags: [CSharp, '  ', Паттерны]\ncategories: design\n---\n", "posts/a.md")
    assert generated_urls(doc) == {"/posts/", "/tags/csharp/", "/tags/паттерны/", "/categories/design/"}
    assert generated_urls(make_doc("---\ntitle: R\n---\n", "about.md")) == set()


def test_build_site_index_generated_pages(make_doc, content_root, tmp_path):
    a = make_doc("---\ntitle: A\ntags: [csharp]\n---\n", "posts/a.md")
    site = build_site_index([a], content_root, tmp_path / "static", PATTERN)
    for url in ("/", "/posts/", "/tags/", "/categories/", "/tags/csharp/"):
        assert site.permalinks[url] == ""
