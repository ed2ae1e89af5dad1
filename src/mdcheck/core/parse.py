"""File discovery, front matter extraction, and markdown-it tokenization"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from mdcheck.core.models import ParsedDoc
from mdcheck.core.utils.hashing import sha256


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md', '.mdx'}
DELIMITERS = {'---': 'yaml', '+++': 'toml'}
TOML_LINE_RE = re.compile(r'at line (\d+)')


class FrontMatterError(ValueError):
    """Front matter block that cannot be loaded; line is 1-based in the file."""

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _load_block(fmt: str, text: str, first_line: int) -> dict[str, Any]:
    """Load a YAML or TOML block; first_line is the file line of the block's first line."""
    if fmt == 'yaml':
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            mark = getattr(e, 'problem_mark', None)
            line = first_line + mark.line if mark is not None else first_line
            raise FrontMatterError(f"Invalid YAML front matter: {e}", line) from e
    else:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            lineno = getattr(e, 'lineno', None)
            if lineno is None:
                # tomllib before 3.14 only reports the position in the message
                m = TOML_LINE_RE.search(str(e))
                lineno = int(m.group(1)) if m else None
            line = first_line + lineno - 1 if lineno else first_line
            raise FrontMatterError(f"Invalid TOML front matter: {e}", line) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Invalid front matter: expected a mapping, got {type(data).__name__}", first_line)
    return data


def locate_frontmatter(text: str) -> tuple[str | None, str, str, int]:
    """Return (format, block_text, body, body_line) without loading the block.

    format is 'yaml' for a '---' block, 'toml' for a '+++' block, None when the
    file has no front matter. body_line is the 1-based file line where body starts.
    Raises FrontMatterError when the block is never closed.
    """
    lines = text.splitlines(keepends=True)
    if not lines:
        return None, '', text, 1

    opener = lines[0].lstrip('\ufeff').rstrip()
    fmt = DELIMITERS.get(opener)
    if fmt is None:
        return None, '', text, 1

    for i in range(1, len(lines)):
        if lines[i].rstrip() == opener:
            return fmt, ''.join(lines[1:i]), ''.join(lines[i + 1:]), i + 2
    raise FrontMatterError(f"Unterminated front matter: no closing '{opener}'", 1)


def split_frontmatter(text: str) -> tuple[str | None, dict[str, Any], str, int]:
    """Return (format, frontmatter_dict, body, body_line) with the header removed."""
    fmt, block, body, body_line = locate_frontmatter(text)
    data = _load_block(fmt, block, first_line=2) if fmt else {}
    return fmt, data, body, body_line


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix in MD_EXTENSIONS)


def relative_path(path: Path, content_root: Path) -> str:
    """POSIX path of path under content_root, or the path itself when outside it."""
    try:
        return path.resolve().relative_to(content_root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def parse_file(path: Path, content_root: Path, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Parse a single markdown file into a ParsedDoc with token stream.

    Broken front matter is recorded on the result rather than raised, so the
    body can still be checked. Non-UTF-8 files raise UnicodeDecodeError.
    """
    raw = path.read_text(encoding='utf-8')
    doc = ParsedDoc(
        path=path,
        rel_path=relative_path(path, content_root),
        raw=raw,
        markdown=raw,
        hash=sha256(raw),
    )
    try:
        doc.fm_format, block, doc.markdown, doc.body_line = locate_frontmatter(raw)
        if doc.fm_format:
            doc.frontmatter = _load_block(doc.fm_format, block, first_line=2)
    except FrontMatterError as e:
        logger.debug("front matter error in %s: %s", path, e)
        doc.fm_error, doc.fm_error_line = str(e), e.line
        if doc.fm_format is None:
            # unterminated: the whole file is header, nothing to tokenize
            doc.markdown = ''

    doc.tokens = _make_parser(parser_config).parse(doc.markdown)
    return doc


def parse_dir(path: Path, content_root: Path, parser_config: str = 'gfm-like') -> list[ParsedDoc]:
    """Parse all .md/.mdx files under path (file or directory)."""
    return [parse_file(p, content_root, parser_config) for p in discover_files(path)]
