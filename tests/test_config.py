"""
Tests for mirrorwiz.yml loading, site settings and logging setup.
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from mirrorwiz.core.config import ConfigError, find_config_file, load_site_config
from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.site import SiteConfig
from mirrorwiz.core.observability.logging_config import (
    ENV_FILE,
    ENV_LEVEL,
    parse_level,
    resolve_level,
    setup_logging,
)


# ═══════════════════════════════════════════════════════════════════
#  Config loading
# ═══════════════════════════════════════════════════════════════════


class TestLoadSiteConfig:
    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_site_config()
        assert config == SiteConfig()
        assert config.site_url == "https://mirror.example.com"
        assert config.output_dir == "dist"

    def test_found_in_parent(self, tmp_path, monkeypatch):
        (tmp_path / "mirrorwiz.yml").write_text("site_name: Parent\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert find_config_file() == (tmp_path / "mirrorwiz.yml").resolve()
        assert load_site_config().site_name == "Parent"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yml"
        path.write_text("site_url: https://mirrors.example.org/\noutput_dir: public\n")
        config = load_site_config(path)
        assert config.site_url == "https://mirrors.example.org"
        assert config.output_dir == "public"

    def test_nested_site_key(self, tmp_path):
        path = tmp_path / "mirrorwiz.yml"
        path.write_text("site:\n  site_name: Nested\n")
        assert load_site_config(path).site_name == "Nested"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "mirrorwiz.yml"
        path.write_text("")
        assert load_site_config(path) == SiteConfig()

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_site_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "mirrorwiz.yml"
        path.write_text("site_name: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_site_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "mirrorwiz.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_site_config(path)

    def test_invalid_url(self, tmp_path):
        path = tmp_path / "mirrorwiz.yml"
        path.write_text("site_url: ftp://nope\n")
        with pytest.raises(ConfigError, match="Invalid site configuration"):
            load_site_config(path)


class TestModels:
    def test_mirror_test_url_defaults_to_origin(self):
        mirror = Mirror(key="a", name="A", url="https://mirrors.example.com/npm/")
        assert mirror.test_url == "https://mirrors.example.com"
        assert mirror.host == "mirrors.example.com"
        assert mirror.base == "https://mirrors.example.com/npm"

    def test_mirror_rejects_relative_url(self):
        with pytest.raises(ValidationError):
            Mirror(key="a", name="A", url="/npm/")

    def test_mirror_is_frozen(self):
        mirror = Mirror(key="a", name="A", url="https://a.test")
        with pytest.raises(ValidationError):
            mirror.url = "https://b.test"


# ═══════════════════════════════════════════════════════════════════
#  Logging
# ═══════════════════════════════════════════════════════════════════


class TestLogging:
    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_parse_level(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level(" Info ") == logging.INFO
        assert parse_level("bogus") == logging.WARNING
        assert parse_level(None, default=logging.ERROR) == logging.ERROR

    def test_cli_level_wins(self, monkeypatch):
        monkeypatch.setenv(ENV_LEVEL, "ERROR")
        assert resolve_level("DEBUG") == logging.DEBUG

    def test_env_level(self, monkeypatch):
        monkeypatch.setenv(ENV_LEVEL, "INFO")
        assert resolve_level() == logging.INFO

    def test_default_level(self, monkeypatch):
        monkeypatch.delenv(ENV_LEVEL, raising=False)
        assert setup_logging() == logging.WARNING

    def test_log_file(self, tmp_path, monkeypatch):
        log_file = tmp_path / "mwz.log"
        monkeypatch.setenv(ENV_FILE, str(log_file))
        monkeypatch.delenv(ENV_LEVEL, raising=False)

        setup_logging()
        logging.getLogger("mirrorwiz.test").debug("hidden on console")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hidden on console" in log_file.read_text()
        assert logging.getLogger().level == logging.DEBUG

    def test_quiets_http_loggers(self):
        setup_logging("INFO")
        assert logging.getLogger("werkzeug").level == logging.WARNING
