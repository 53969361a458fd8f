"""Tests for config.py: env parsing, location providers, config file I/O."""

import json
import os

import pytest

from mataho_cli import config
from mataho_cli.config import (
    Configuration,
    _env_bool,
    _env_int,
    env_dir_provider,
    find_config_dir,
    fixed_dir_provider,
    load_config,
    platform_dir_provider,
    save_config,
)
from mataho_cli.exceptions import SetupError


class TestEnvHelpers:
    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_env_bool_true(self, monkeypatch, raw):
        monkeypatch.setenv("MATAHO_TEST_FLAG", raw)
        assert _env_bool("MATAHO_TEST_FLAG") is True

    def test_env_bool_default(self, monkeypatch):
        monkeypatch.delenv("MATAHO_TEST_FLAG", raising=False)
        assert _env_bool("MATAHO_TEST_FLAG", default=True) is True

    def test_env_int_invalid_falls_back(self, monkeypatch):
        monkeypatch.setenv("MATAHO_TEST_INT", "abc")
        assert _env_int("MATAHO_TEST_INT", 7) == 7

    def test_env_int(self, monkeypatch):
        monkeypatch.setenv("MATAHO_TEST_INT", "12")
        assert _env_int("MATAHO_TEST_INT", 7) == 12


class TestWarn:
    def test_prints_to_stderr(self, capsys):
        config.warn("careful")
        assert capsys.readouterr().err == "[WARN] careful\n"

    def test_quiet(self, capsys, monkeypatch):
        monkeypatch.setattr(config, "RUNTIME_QUIET", True)
        config.warn("careful")
        assert capsys.readouterr().err == ""


class TestProviders:
    def test_env_provider(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MATAHO_CONFIG_DIR", str(tmp_path))
        assert env_dir_provider()() == tmp_path

    def test_env_provider_unset(self):
        assert env_dir_provider()() is None

    @pytest.mark.skipif(os.name == "nt", reason="XDG layout is POSIX only")
    def test_platform_provider_xdg(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert platform_dir_provider()() == tmp_path / "mataho"

    def test_first_existing_config_wins(self, tmp_path):
        first, second = tmp_path / "a", tmp_path / "b"
        second.mkdir()
        (second / "config.json").write_text("{}")
        found = find_config_dir((fixed_dir_provider(first), fixed_dir_provider(second)))
        assert found == second

    def test_falls_back_to_first_candidate(self, tmp_path):
        first, second = tmp_path / "a", tmp_path / "b"
        found = find_config_dir(
            (lambda: None, fixed_dir_provider(first), fixed_dir_provider(second))
        )
        assert found == first

    def test_no_candidates(self):
        with pytest.raises(SetupError) as exc_info:
            find_config_dir((lambda: None,))
        assert exc_info.value.exit_code == 2


class TestConfigFile:
    def test_defaults(self):
        cfg = Configuration()
        assert cfg.base_url == "https://127.0.0.1:8443"
        assert cfg.api_token == "REPLACE_WITH_TOKEN"

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "sub" / "config.json"
        cfg = Configuration("https://box.local", 8443, "tok", [{"id": "g", "name": "n"}])
        save_config(path, cfg)
        assert load_config(path) == cfg
        assert json.loads(path.read_text())["groups"] == [{"id": "g", "name": "n"}]

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_save_is_owner_only(self, tmp_path):
        path = tmp_path / "config.json"
        save_config(path, Configuration())
        assert path.stat().st_mode & 0o777 == 0o600

    def test_groups_omitted_when_empty(self, tmp_path):
        path = tmp_path / "config.json"
        save_config(path, Configuration())
        assert "groups" not in json.loads(path.read_text())

    def test_port_as_string(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"hostname": "h", "port": "8443", "api_token": "t"}))
        assert load_config(path).port == 8443

    def test_null_groups_is_empty(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"hostname": "h", "port": 1, "api_token": "t", "groups": None})
        )
        assert load_config(path).groups == []

    @pytest.mark.parametrize(
        "content,needle",
        [
            (None, "No configuration found"),
            ("{bad", "Failed to parse JSON"),
            ("[]", "must contain a JSON object"),
            ('{"hostname": "h"}', "missing: port, api_token"),
            ('{"hostname": "h", "port": "x", "api_token": "t"}', "Invalid port"),
            ('{"hostname": "h", "port": 1, "api_token": "t", "groups": {}}', "must be a list"),
        ],
    )
    def test_load_errors(self, tmp_path, content, needle):
        path = tmp_path / "config.json"
        if content is not None:
            path.write_text(content)
        with pytest.raises(SetupError) as exc_info:
            load_config(path)
        assert needle in str(exc_info.value)
        assert str(exc_info.value).startswith("[SETUP_NEEDED]")
