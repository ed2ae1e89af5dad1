"""Slug and heading-anchor generation"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug.

    Word characters of any script survive, so Cyrillic titles keep their letters.
    """
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def anchorize(text: str) -> str:
    """Heading id as the site generator derives it: like slugify, but underscores are kept.

    Each whitespace character becomes its own hyphen, so 'a  b' is 'a--b'.
    """
    text = text.strip().lower()
    text = re.sub(r'[^\w\s-]', '', text)
    return re.sub(r'\s', '-', text)
