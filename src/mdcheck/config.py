"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"

DEFAULT_LANGUAGES = [
    "bash", "c", "c#", "console", "cpp", "cs", "csharp", "css", "diff", "fsharp",
    "go", "html", "ini", "java", "javascript", "js", "json", "kotlin", "markdown",
    "md", "plaintext", "powershell", "ps1", "python", "py", "sh", "shell", "sql",
    "text", "toml", "ts", "typescript", "txt", "xml", "yaml", "yml",
]


class Settings(BaseModel):
    app_name:       str = "mdcheck"
    db_url:         str = "sqlite:///mdcheck.db"
    content_dir:    str = Field(default="content", description="Root of the Markdown content tree")
    static_dir:     str = Field(default="static",  description="Root of static assets served at /")
    permalink:      str = Field(default="/{section}/{slug}/", description="URL pattern; {section} and {slug}")
    parser_config:  str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    known_languages: list[str] = Field(default_factory=lambda: list(DEFAULT_LANGUAGES),
                                       description="Accepted fenced code block language tags")
    disabled_rules: list[str] = Field(default_factory=list, description="Rule names to skip")
    fail_on:        str = Field(default="error", pattern="^(error|warning)$", description="Lowest failing severity")
    output_format:  str = Field(default="text", pattern="^(text|json)$", description="text or json")
    log_level:      str = Field(default="WARNING", description="Logging level for the mdcheck logger")


def _list_fields() -> set[str]:
    """Names of Settings fields typed as lists (comma-separated in env vars)."""
    return {name for name, f in Settings.model_fields.items() if getattr(f.annotation, "__origin__", None) is list}


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDCHECK_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    list_fields = _list_fields()
    for name in Settings.model_fields:
        if val := os.getenv(f"MDCHECK_{name.upper()}"):
            data[name] = [v.strip() for v in val.split(",") if v.strip()] if name in list_fields else val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
