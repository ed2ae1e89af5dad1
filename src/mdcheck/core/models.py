"""Data models for parsed content, front matter, and lint results"""

from dataclasses import dataclass, field
import datetime as dt
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FrontMatter(BaseModel):
    """Front matter fields the site generator relies on; anything else passes through."""
    model_config = ConfigDict(extra="allow")

    title:       str
    date:        Union[dt.datetime, dt.date]
    draft:       bool = False
    categories:  list[str] = Field(default_factory=list)
    tags:        list[str] = Field(default_factory=list)
    aliases:     list[str] = Field(default_factory=list)
    slug:        Optional[str] = None
    url:         Optional[str] = None
    description: Optional[str] = None
    image:       Optional[str] = None
    images:      list[str] = Field(default_factory=list)
    lastmod:     Optional[Union[dt.datetime, dt.date]] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v

    @field_validator("categories", "tags", "aliases", "images", mode="before")
    @classmethod
    def _scalar_to_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class Severity(str, Enum):
    """Issue severity; error outranks warning."""
    error = "error"
    warning = "warning"

    @property
    def rank(self) -> int:
        return 2 if self is Severity.error else 1


class Issue(BaseModel):
    """A single content-hygiene finding."""
    path: str
    line: Optional[int] = None      # 1-based file line; None when not tied to a line
    rule: str
    severity: Severity
    message: str


class LintReport(BaseModel):
    files: int = 0
    issues: list[Issue] = Field(default_factory=list)

    def count(self, severity: Severity) -> int:
        return sum(1 for i in self.issues if i.severity == severity)

    def failed(self, threshold: Severity) -> bool:
        """True when any issue is at or above the threshold severity."""
        return any(i.severity.rank >= threshold.rank for i in self.issues)


@dataclass
class ParsedDoc:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:        Path
    rel_path:    str            # POSIX path relative to the content root
    raw:         str            # full file content (includes front matter)
    markdown:    str            # body only (front matter stripped)
    hash:        str
    body_line:   int = 1        # 1-based file line of the body's first line
    fm_format:   Optional[str] = None   # 'yaml', 'toml', or None when absent
    frontmatter: dict[str, Any] = field(default_factory=dict)
    fm_error:    Optional[str] = None
    fm_error_line: Optional[int] = None
    tokens:      list = field(default_factory=list)

    def file_line(self, body_line: Optional[int]) -> Optional[int]:
        """Convert a 0-based body line (token.map) to a 1-based file line."""
        if body_line is None:
            return None
        return self.body_line + body_line
