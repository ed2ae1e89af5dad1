"""Unit tests for core/utils/slug.py"""

import pytest

from mdcheck.core.utils.slug import anchorize, slugify


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("my_file_name", "my-file-name"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("multiple---hyphens", "multiple-hyphens"),
    ("Special! Ch@rs#", "special-chrs"),
    ("Объекты-значения", "объекты-значения"),
    ("", ""),
])
def test_slugify_basic(text, expected):
    """slugify converts text to lowercase hyphenated slug."""
    assert slugify(text) == expected


@pytest.mark.parametrize("text,expected", [
    ("Реализация", "реализация"),
    ("Visitor и enum", "visitor-и-enum"),
    ("Что такое Lifetime?", "что-такое-lifetime"),
    ("snake_case name", "snake_case-name"),
    ("Шаг  первый", "шаг--первый"),
])
def test_anchorize(text, expected):
    """anchorize keeps letters of any script and underscores, drops punctuation."""
    assert anchorize(text) == expected
