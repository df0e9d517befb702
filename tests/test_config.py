"""Tests for authprobe.config -- XDG paths, atomic writes, global config, precedence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from authprobe.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    parse_bool,
    resolve_probe_config,
    save_global_config,
)
from authprobe.exceptions import ConfigError
from authprobe.models import GlobalConfig, ProbeConfig


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestPaths:
    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("authprobe.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        result = get_config_dir()
        assert result == custom / "authprobe"
        assert result.is_dir()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("authprobe.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "authprobe"

    def test_non_xdg_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("authprobe.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".authprobe"
        assert get_data_dir() == tmp_path / ".authprobe"

    def test_data_dir_xdg(self, isolated_config: Path) -> None:
        assert get_data_dir() == isolated_config / "data" / "authprobe"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "file.json"
        _atomic_write(target, "hello\n")
        assert target.read_text(encoding="utf-8") == "hello\n"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        _atomic_write(target, "one")
        _atomic_write(target, "two")
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]
        assert target.read_text(encoding="utf-8") == "two"


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.probe.timeout == 30.0
        assert config.probe.verify_ssl is True

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(probe=ProbeConfig(timeout=5, verify_ssl=False))
        save_global_config(config)
        assert load_global_config() == config

    def test_invalid_json(self, isolated_config: Path) -> None:
        global_config_path().write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_values(self, isolated_config: Path) -> None:
        global_config_path().write_text(
            json.dumps({"probe": {"timeout": -1}}), encoding="utf-8"
        )
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveProbeConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_probe_config() == ProbeConfig()

    def test_config_file(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(probe=ProbeConfig(timeout=12)))
        assert resolve_probe_config().timeout == 12

    def test_env_overrides_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_global_config(GlobalConfig(probe=ProbeConfig(timeout=12)))
        monkeypatch.setenv("AUTHPROBE_TIMEOUT", "4.5")
        monkeypatch.setenv("AUTHPROBE_VERIFY_SSL", "no")

        config = resolve_probe_config()
        assert config.timeout == 4.5
        assert config.verify_ssl is False

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTHPROBE_TIMEOUT", "4.5")
        monkeypatch.setenv("AUTHPROBE_VERIFY_SSL", "false")

        config = resolve_probe_config(cli_timeout=2, cli_verify_ssl=True)
        assert config.timeout == 2
        assert config.verify_ssl is True

    def test_explicit_global_config_skips_disk(self, isolated_config: Path) -> None:
        global_config_path().write_text("{broken", encoding="utf-8")
        config = resolve_probe_config(global_config=GlobalConfig())
        assert config.timeout == 30.0

    def test_bad_env_timeout(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTHPROBE_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="AUTHPROBE_TIMEOUT"):
            resolve_probe_config()

    def test_bad_env_bool(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTHPROBE_VERIFY_SSL", "maybe")
        with pytest.raises(ConfigError, match="AUTHPROBE_VERIFY_SSL"):
            resolve_probe_config()

    def test_non_positive_timeout_rejected(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid probe settings"):
            resolve_probe_config(cli_timeout=0)

    def test_empty_env_ignored(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTHPROBE_TIMEOUT", "")
        assert resolve_probe_config().timeout == 30.0


class TestParseBool:
    @pytest.mark.parametrize("text", ["1", "true", "Yes", " ON "])
    def test_true_spellings(self, text: str) -> None:
        assert parse_bool(text) is True

    @pytest.mark.parametrize("text", ["0", "FALSE", "no", "off"])
    def test_false_spellings(self, text: str) -> None:
        assert parse_bool(text) is False

    @pytest.mark.parametrize("text", ["ture", "", "2", "enabled"])
    def test_unrecognised_is_none(self, text: str) -> None:
        assert parse_bool(text) is None
