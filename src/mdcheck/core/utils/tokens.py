"""Shared markdown-it token utilities"""

import re
from typing import Iterator


HEADING_ID_RE = re.compile(r'\s*\{#([^}\s]+)\}\s*$')


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def iter_headings(tokens: list) -> Iterator[tuple[str, int | None]]:
    """Yield (heading text, 0-based body line) for every heading in the stream."""
    for i, tok in enumerate(tokens):
        if heading_level(tok) is None or i + 1 >= len(tokens):
            continue
        inline = tokens[i + 1]
        text = ''.join(c.content for c in (inline.children or []) if c.type in ('text', 'code_inline'))
        yield text or inline.content, tok.map[0] if tok.map else None


def split_heading_id(text: str) -> tuple[str, str | None]:
    """Split a trailing '{#custom-id}' attribute off heading text."""
    m = HEADING_ID_RE.search(text)
    if m:
        return text[:m.start()], m.group(1)
    return text, None


def iter_inline(tokens: list) -> Iterator[tuple[object, int | None]]:
    """Yield (child token, 0-based body line) for every child of every inline token.

    Child tokens carry no map of their own; the enclosing block's start line is
    advanced by the soft/hard breaks seen so far.
    """
    for tok in tokens:
        if tok.type != 'inline' or not tok.children:
            continue
        line = tok.map[0] if tok.map else None
        for child in tok.children:
            if child.type in ('softbreak', 'hardbreak'):
                if line is not None:
                    line += 1
                continue
            yield child, line
