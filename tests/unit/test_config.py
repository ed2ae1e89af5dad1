"""Unit tests for config.py"""

import pytest

from mdcheck.config import DEFAULT_LANGUAGES, load_config


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    """Run each test from a clean tmp directory so no stray config.yaml is read."""
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults(monkeypatch):
    """Settings defaults are used when no config.yaml, env var, or CLI override exists."""
    monkeypatch.delenv("MDCHECK_CONTENT_DIR", raising=False)
    settings = load_config()
    assert settings.content_dir == "content"
    assert settings.fail_on == "error"
    assert "csharp" in settings.known_languages


def test_load_config_reads_config_yaml(tmp_path):
    """Values in config.yaml replace the defaults."""
    (tmp_path / "config.yaml").write_text("content_dir: site/content\nknown_languages: [csharp]\n")
    settings = load_config()
    assert settings.content_dir == "site/content"
    assert settings.known_languages == ["csharp"]


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDCHECK_STATIC_DIR takes precedence over config.yaml."""
    (tmp_path / "config.yaml").write_text("static_dir: assets\n")
    monkeypatch.setenv("MDCHECK_STATIC_DIR", "public")
    assert load_config().static_dir == "public"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var."""
    monkeypatch.setenv("MDCHECK_FAIL_ON", "warning")
    settings = load_config(overrides={"fail_on": "error"})
    assert settings.fail_on == "error"


def test_load_config_none_override_ignored(monkeypatch):
    """None-valued overrides (unset CLI options) leave lower layers alone."""
    monkeypatch.setenv("MDCHECK_OUTPUT_FORMAT", "json")
    assert load_config(overrides={"output_format": None}).output_format == "json"


def test_load_config_env_list_is_comma_separated(monkeypatch):
    """List fields are split on commas when read from the environment."""
    monkeypatch.setenv("MDCHECK_DISABLED_RULES", "fence-unknown-language, frontmatter-future-date")
    settings = load_config()
    assert settings.disabled_rules == ["fence-unknown-language", "frontmatter-future-date"]


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_rejects_bad_fail_on():
    """fail_on only accepts error or warning."""
    with pytest.raises(ValueError):
        load_config(overrides={"fail_on": "info"})


def test_default_languages_not_shared():
    """Each Settings instance gets its own language list."""
    a = load_config()
    a.known_languages.append("cobol")
    assert "cobol" not in load_config().known_languages
    assert "cobol" not in DEFAULT_LANGUAGES
