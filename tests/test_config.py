"""
Tests for configuration values and configuration file discovery.
"""

import json
import logging

import pytest

from appbase.core.config import (
    ConfigFileNotFoundError,
    ConfigurationError,
    ConfigurationFile,
    LoggingConfig,
    _parse_env_overrides,
    get_field,
    set_field,
)
from appbase.utils.paths import clean_path, clean_search_paths


# ===========================================================================
# ConfigurationFile
# ===========================================================================

class TestConfigurationFileNew:
    """File name, directory and search path handling."""

    @pytest.mark.parametrize("file,wanted_filename,wanted_path", [
        ("config.yaml", "config.yaml", ""),
        ("./config.yaml", "config.yaml", "."),
        ("/etc/configuration/config.yaml", "config.yaml", "/etc/configuration"),
        ("/etc//configuration/config.yaml", "config.yaml", "/etc/configuration"),
    ])
    def test_split(self, file, wanted_filename, wanted_path):
        config = ConfigurationFile.new(file)
        assert config.filename == wanted_filename
        assert config.path == wanted_path
        assert config.search_paths == ()

    def test_search_paths(self):
        config = ConfigurationFile.new("config.yaml", [
            "$PWD",
            "/normal/path",
            "//doubleslash/in/front",
            "/doubleslash//in/middle",
            "/etc/../invalid",
        ])
        assert config.search_paths == (
            "$PWD",
            "/normal/path",
            "/doubleslash/in/front",
            "/doubleslash/in/middle",
        )

    @pytest.mark.parametrize("file,wanted_name,wanted_type", [
        ("", "", "yaml"),
        ("config.yaml", "config", "yaml"),
        ("config.json", "config", "json"),
        ("settings", "settings", "yaml"),
    ])
    def test_name_and_type(self, file, wanted_name, wanted_type):
        assert ConfigurationFile(filename=file).name_and_type() == (wanted_name, wanted_type)


class TestConfigurationFileResolve:
    """Locating, loading and saving the document."""

    def test_explicit_path(self, tmp_path):
        target = tmp_path / "app.yaml"
        target.write_text("name: test\n")
        assert ConfigurationFile.new(str(target)).resolve() == target

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(ConfigFileNotFoundError):
            ConfigurationFile.new(str(tmp_path / "missing.yaml")).resolve()

    def test_search_paths_in_order(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (second / "config.yaml").write_text("where: second\n")
        config = ConfigurationFile.new("config.yaml", [str(first), str(second)])
        assert config.resolve() == second / "config.yaml"

    def test_alternate_extension(self, tmp_path):
        (tmp_path / "config.json").write_text("{}")
        config = ConfigurationFile.new("config.yaml", [str(tmp_path)])
        assert config.resolve() == tmp_path / "config.json"

    def test_environment_variables_expand(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APPBASE_TEST_DIR", str(tmp_path))
        (tmp_path / "config.yaml").write_text("a: 1\n")
        config = ConfigurationFile.new("config.yaml", ["$APPBASE_TEST_DIR"])
        assert config.load() == {"a": 1}

    def test_not_found(self, tmp_path):
        with pytest.raises(ConfigFileNotFoundError):
            ConfigurationFile.new("config.yaml", [str(tmp_path)]).resolve()

    def test_load_yaml(self, tmp_path):
        target = tmp_path / "config.yaml"
        target.write_text("database:\n  host: localhost\n  port: 5432\n")
        assert ConfigurationFile.new(str(target)).load() == {
            "database": {"host": "localhost", "port": 5432},
        }

    def test_load_empty_yaml(self, tmp_path):
        target = tmp_path / "config.yaml"
        target.write_text("")
        assert ConfigurationFile.new(str(target)).load() == {}

    def test_load_json(self, tmp_path):
        target = tmp_path / "config.json"
        target.write_text(json.dumps({"a": {"b": "c"}}))
        assert ConfigurationFile.new(str(target)).load() == {"a": {"b": "c"}}

    def test_load_rejects_non_mapping(self, tmp_path):
        target = tmp_path / "config.yaml"
        target.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            ConfigurationFile.new(str(target)).load()

    def test_load_rejects_invalid_yaml(self, tmp_path):
        target = tmp_path / "config.yaml"
        target.write_text("a: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigurationFile.new(str(target)).load()

    def test_load_rejects_invalid_utf8(self, tmp_path):
        target = tmp_path / "config.yaml"
        target.write_bytes(b"password: \xff\xfe\n")
        with pytest.raises(ConfigurationError):
            ConfigurationFile.new(str(target)).load()

    def test_unsupported_type(self, tmp_path):
        target = tmp_path / "config.toml"
        target.write_text("a = 1\n")
        with pytest.raises(ConfigurationError):
            ConfigurationFile.new(str(target)).load()

    @pytest.mark.parametrize("name", ["config.yaml", "config.json"])
    def test_save_round_trip(self, tmp_path, name):
        target = tmp_path / name
        target.write_text("{}")
        config = ConfigurationFile.new(str(target))
        document = {"secret": {"nonce": "", "ciphersuite": "AES-256-GCM", "hexdata": "6869"}}
        assert config.save(document) == target
        assert config.load() == document


# ===========================================================================
# Field Paths
# ===========================================================================

class TestFieldPaths:
    """Dotted field lookup and assignment."""

    def test_get_nested(self):
        assert get_field({"a": {"b": {"c": 1}}}, "a.b.c") == 1

    def test_get_missing(self):
        with pytest.raises(ConfigurationError):
            get_field({"a": {}}, "a.b")

    def test_get_missing_with_default(self):
        assert get_field({"a": {}}, "a.b", None) is None

    def test_get_through_scalar(self):
        with pytest.raises(ConfigurationError):
            get_field({"a": 1}, "a.b")

    def test_set_creates_mappings(self):
        document = {}
        set_field(document, "a.b.c", "x")
        assert document == {"a": {"b": {"c": "x"}}}

    def test_set_through_scalar(self):
        with pytest.raises(ConfigurationError):
            set_field({"a": 1}, "a.b", "x")

    @pytest.mark.parametrize("field_path", ["", "a..b", ".a", "a."])
    def test_invalid_paths(self, field_path):
        with pytest.raises(ConfigurationError):
            get_field({}, field_path)


# ===========================================================================
# LoggingConfig
# ===========================================================================

class TestLoggingConfig:
    """Tests for logging configuration values."""

    def test_defaults(self):
        config = LoggingConfig()
        assert config.enabled is False
        assert config.log_level == logging.ERROR
        assert config.is_json
        assert config.to_console
        assert not config.add_source

    @pytest.mark.parametrize("level,expected", [
        ("error", logging.ERROR),
        ("warn", logging.WARNING),
        ("info", logging.INFO),
        ("debug", logging.DEBUG),
        ("DEBUG", logging.DEBUG),
        ("verbose", logging.INFO),
    ])
    def test_levels(self, level, expected):
        assert LoggingConfig(level=level).log_level == expected

    def test_debug_adds_source(self):
        assert LoggingConfig(level="debug").add_source

    def test_text_format(self):
        assert not LoggingConfig(format="TEXT").is_json

    def test_invalid_format(self):
        with pytest.raises(ConfigurationError):
            LoggingConfig(format="xml")

    def test_with_target(self):
        config = LoggingConfig()
        assert config.with_target(None) is config
        assert config.with_target("app.log").target == "app.log"
        assert not config.with_target("app.log").to_console

    def test_immutable(self):
        with pytest.raises(AttributeError):
            LoggingConfig().level = "debug"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("APPBASE_LOG", "true")
        monkeypatch.setenv("APPBASE_LOGLEVEL", "debug")
        monkeypatch.setenv("APPBASE_LOGFORMAT", "text")
        monkeypatch.setenv("APPBASE_LOGTARGET", "/tmp/appbase.log")
        config = LoggingConfig.from_env()
        assert config == LoggingConfig(
            enabled=True, level="debug", format="text", target="/tmp/appbase.log",
        )

    def test_env_skips_secrets(self, monkeypatch):
        monkeypatch.setenv("APPBASE_MASTER_KEY", "00" * 32)
        monkeypatch.setenv("APPBASE_LOGLEVEL", "info")
        overrides = _parse_env_overrides()
        assert "master_key" not in overrides
        assert overrides["loglevel"] == "info"


# ===========================================================================
# Path Cleaning
# ===========================================================================

class TestPaths:
    """Tests for path helpers."""

    @pytest.mark.parametrize("path,expected", [
        ("", "."),
        ("a/./b/", "a/b"),
        ("///root", "/root"),
        ("$HOME/.config", "$HOME/.config"),
    ])
    def test_clean_path(self, path, expected):
        assert clean_path(path) == expected

    def test_clean_search_paths_none(self):
        assert clean_search_paths(None) == []
