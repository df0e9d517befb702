"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for authprobe:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.authprobe/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~authprobe.models.GlobalConfig`
  JSON file storing probe and output defaults.
* **Precedence resolution** -- :func:`resolve_probe_config` merges CLI
  flags, environment variables and the global config into the effective
  :class:`~authprobe.models.ProbeConfig`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from authprobe.exceptions import ConfigError
from authprobe.models import GlobalConfig, ProbeConfig

_APP_NAME = "authprobe"
_CONFIG_FILENAME = "config.json"

ENV_TIMEOUT = "AUTHPROBE_TIMEOUT"
ENV_VERIFY_SSL = "AUTHPROBE_VERIFY_SSL"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/authprobe/`` (default ``~/.config/authprobe/``).
    On macOS/Windows: ``~/.authprobe/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/authprobe/`` (default ``~/.local/share/authprobe/``).
    On macOS/Windows: ``~/.authprobe/``.

    Crash logs go in its ``logs/`` subdirectory.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~authprobe.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def parse_bool(text: str) -> Optional[bool]:
    """Return the boolean spelled by *text*, or ``None`` if it is not one.

    Accepts ``1/true/yes/on`` and ``0/false/no/off``, case-insensitively.
    """
    value = text.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


def _env_bool(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    value = parse_bool(raw)
    if value is not None:
        return value
    raise ConfigError(f"Environment variable {name} must be a boolean, got: {raw!r}")


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"Environment variable {name} must be a number, got: {raw!r}") from None


def resolve_probe_config(
    cli_timeout: Optional[float] = None,
    cli_verify_ssl: Optional[bool] = None,
    global_config: Optional[GlobalConfig] = None,
) -> ProbeConfig:
    """Resolve the effective probe settings.

    Precedence (high to low):
        1. CLI flags (``cli_timeout``, ``cli_verify_ssl``)
        2. Environment variables (``AUTHPROBE_TIMEOUT``, ``AUTHPROBE_VERIFY_SSL``)
        3. User config (``~/.config/authprobe/config.json``)
        4. Defaults

    Args:
        cli_timeout: Timeout in seconds from the command line.
        cli_verify_ssl: SSL verification flag from the command line.
        global_config: Already-loaded config; read from disk when omitted.

    Raises:
        ConfigError: If an environment value or the merged result is invalid.
    """
    base = global_config if global_config is not None else load_global_config()
    data = base.probe.model_dump()

    env_timeout = _env_float(ENV_TIMEOUT)
    if env_timeout is not None:
        data["timeout"] = env_timeout
    env_verify = _env_bool(ENV_VERIFY_SSL)
    if env_verify is not None:
        data["verify_ssl"] = env_verify

    if cli_timeout is not None:
        data["timeout"] = cli_timeout
    if cli_verify_ssl is not None:
        data["verify_ssl"] = cli_verify_ssl

    try:
        return ProbeConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid probe settings: {exc}") from exc
