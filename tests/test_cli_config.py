"""Tests for config file, environment and CLI precedence."""

from types import SimpleNamespace

import pytest

from cli_config import ConfigError, apply_cli_overrides, apply_env_overrides, configure, load_config
from constants import Constants


def _args(**kwargs):
    defaults = {"CONFIG": None, "API_URL": None, "INDEX_FILE": None, "REQUEST_TIMEOUT": None}
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestLoadConfig:
    """YAML config files."""

    def test_no_path(self):
        """No config file means no settings."""
        assert load_config(None) == {}

    def test_section(self, tmp_path):
        """The gexreg section is used when present."""
        path = tmp_path / "config.yml"
        path.write_text("gexreg:\n  api_url: http://cfg.test\nother: 1\n", encoding="utf-8")
        assert load_config(str(path)) == {"api_url": "http://cfg.test"}

    def test_whole_document(self, tmp_path):
        """Without a section the whole document is used."""
        path = tmp_path / "config.yml"
        path.write_text("request_timeout: 5\n", encoding="utf-8")
        assert load_config(str(path)) == {"request_timeout": 5}

    def test_missing_file(self, tmp_path):
        """Missing files are an error."""
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "nope.yml"))

    def test_invalid_yaml(self, tmp_path):
        """Unparseable files are an error."""
        path = tmp_path / "config.yml"
        path.write_text("a: [1, 2\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))


class TestPrecedence:
    """config < environment < CLI."""

    def test_env_overrides(self):
        """Environment variables set the tunables."""
        apply_env_overrides({
            "GEXREG_API_URL": "http://env.test",
            "GEXREG_INDEX": "env.yaml",
            "GEXREG_REQUEST_TIMEOUT": "7",
        })
        assert Constants.API_BASE_URL == "http://env.test"
        assert Constants.INDEX_FILE == "env.yaml"
        assert Constants.REQUEST_TIMEOUT == 7

    def test_invalid_env_timeout_is_ignored(self):
        """A non-numeric timeout keeps the previous value."""
        before = Constants.REQUEST_TIMEOUT
        apply_env_overrides({"GEXREG_REQUEST_TIMEOUT": "soon"})
        assert Constants.REQUEST_TIMEOUT == before

    def test_cli_api_url_clears_index(self):
        """An explicit --api wins over an index from config or env."""
        Constants.INDEX_FILE = "env.yaml"
        apply_cli_overrides(_args(API_URL="http://cli.test"))
        assert Constants.API_BASE_URL == "http://cli.test"
        assert Constants.INDEX_FILE is None

    def test_full_chain(self, tmp_path):
        """Each layer overrides the one before it."""
        path = tmp_path / "config.yml"
        path.write_text(
            "gexreg:\n  api_url: http://cfg.test\n  request_timeout: 3\n  retry_max: 5\n",
            encoding="utf-8",
        )
        configure(
            _args(CONFIG=str(path), REQUEST_TIMEOUT=9),
            environ={"GEXREG_API_URL": "http://env.test"},
        )
        assert Constants.API_BASE_URL == "http://env.test"
        assert Constants.REQUEST_TIMEOUT == 9
        assert Constants.HTTP_RETRY_MAX == 5
