"""Configuration management with XDG paths and atomic writes.

This module handles all persistent configuration for instakit:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.instakit/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Settings** -- a single :class:`~instakit.models.Settings` JSON file
  holding the client id, redirect URI and a few request options.
* **Precedence** -- ``INSTAKIT_CLIENT_ID`` / ``INSTAKIT_REDIRECT_URI``
  override the file, and ``INSTAKIT_SETTINGS`` points at an alternative
  file.

Settings are read once at startup and the resulting
:class:`~instakit.models.ClientCredentials` stay fixed for the life of the
process.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from instakit.exceptions import ConfigError
from instakit.models import ClientCredentials, Settings

_APP_NAME = "instakit"
_SETTINGS_FILENAME = "settings.json"

ENV_SETTINGS = "INSTAKIT_SETTINGS"
ENV_CLIENT_ID = "INSTAKIT_CLIENT_ID"
ENV_REDIRECT_URI = "INSTAKIT_REDIRECT_URI"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, else ``$HOME/<segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/instakit/`` (default ``~/.config/instakit/``).
    On macOS/Windows: ``~/.instakit/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (stored token, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/instakit/`` (default ``~/.local/share/instakit/``).
    On macOS/Windows: ``~/.instakit/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write *data* to *path* atomically using a temp file and rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX. When *mode* is given the
    permissions are applied before any content is written.

    Raises:
        OSError: If the file cannot be written. The temp file is removed.
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
        if mode is not None:
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
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


# --- Settings ---


def settings_path() -> Path:
    """Path of the settings file, honouring ``INSTAKIT_SETTINGS``."""
    override = os.environ.get(ENV_SETTINGS)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / _SETTINGS_FILENAME


def load_settings(path: Optional[Path] = None, apply_env: bool = True) -> Settings:
    """Load settings from disk and apply environment overrides.

    Args:
        path: Explicit settings file. Defaults to :func:`settings_path`.
        apply_env: Apply the ``INSTAKIT_CLIENT_ID`` and
            ``INSTAKIT_REDIRECT_URI`` overrides.

    Returns:
        The effective :class:`~instakit.models.Settings`. A missing file
        yields defaults (no client id, no redirect URI), which disables
        login rather than failing here.

    Raises:
        ConfigError: If the file exists but is not valid JSON or fails
            validation.
    """
    path = path or settings_path()
    settings = Settings()
    if path.is_file():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            settings = Settings.model_validate(data)
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            raise ConfigError(f"Invalid settings at {path}: {exc}") from exc

    if not apply_env:
        return settings

    overrides: dict[str, str] = {}
    client_id = os.environ.get(ENV_CLIENT_ID)
    if client_id:
        overrides["client_id"] = client_id
    redirect_uri = os.environ.get(ENV_REDIRECT_URI)
    if redirect_uri:
        overrides["redirect_uri"] = redirect_uri
    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist *settings* atomically and return the path written."""
    path = path or settings_path()
    data = settings.model_dump(mode="json")
    atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def load_credentials(path: Optional[Path] = None) -> ClientCredentials:
    """Shortcut for ``load_settings(path).credentials``."""
    return load_settings(path).credentials
