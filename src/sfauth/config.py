"""Saved profiles and credential sources.

A profile is a JSON file under ``<config dir>/profiles/`` describing how to
log in to one org: the strategy, the instance name, HTTP settings, and for
each credential parameter the place its value is read from at login time
(``env:VAR``, ``file:/path`` or ``prompt``). Secrets themselves are never
written to disk.

On Linux and the BSDs the config and log directories follow the XDG base
directory variables; everywhere else both live under ``~/.sfauth``.
"""

from __future__ import annotations

import contextlib
import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from sfauth.exceptions import ConfigError
from sfauth.models import Profile

_APP_NAME = "sfauth"

ENV_PROFILE = "SFAUTH_PROFILE"
ENV_INSTANCE_NAME = "SFAUTH_INSTANCE_NAME"


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: str) -> Path:
    if _is_xdg_platform():
        root = os.environ.get(xdg_var) or Path.home() / xdg_default
        path = Path(root) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/sfauth`` (default ``~/.config/sfauth``), or ``~/.sfauth``."""
    return _app_dir("XDG_CONFIG_HOME", ".config")


def get_log_dir() -> Path:
    """Where crash logs go: ``$XDG_DATA_HOME/sfauth/logs``, or ``~/.sfauth/logs``."""
    path = _app_dir("XDG_DATA_HOME", ".local/share") / "logs"
    path.mkdir(exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    path = get_config_dir() / "profiles"
    path.mkdir(exist_ok=True)
    return path


def _atomic_write(path: Path, text: str) -> None:
    """Replace *path* with *text* so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Names of the saved profiles, sorted."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Read and validate the profile called *name*.

    Raises:
        ConfigError: If it does not exist or is not a valid profile.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        return Profile.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except ValueError as exc:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors.
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    text = json.dumps(profile.model_dump(mode="json"), indent=2) + "\n"
    _atomic_write(_profile_path(profile.name), text)


def delete_profile(name: str) -> None:
    """Remove the profile called *name*.

    Raises:
        ConfigError: If it does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


def resolve_profile(cli_profile: Optional[str] = None) -> Optional[Profile]:
    """Pick the profile a command should use.

    The ``--profile`` flag wins, then ``SFAUTH_PROFILE``, then the single
    saved profile if there is exactly one. ``SFAUTH_INSTANCE_NAME``
    overrides the chosen profile's instance name.

    Returns:
        The profile, or ``None`` when nothing selects one.

    Raises:
        ConfigError: If the selected profile cannot be loaded.
    """
    name = cli_profile or os.environ.get(ENV_PROFILE)
    if not name:
        saved = list_profiles()
        if len(saved) != 1:
            return None
        name = saved[0]

    profile = load_profile(name)
    instance_name = os.environ.get(ENV_INSTANCE_NAME)
    if instance_name:
        profile.instance_name = instance_name
    return profile


# --- Credential sources ---


def _read_env(var: str, source: str) -> str:
    if var not in os.environ:
        raise ConfigError(f"Environment variable '{var}' is not set (source: {source})")
    return os.environ[var]


def _read_file(location: str, source: str) -> str:
    path = Path(location).expanduser()
    if not path.is_file():
        raise ConfigError(f"Credential file not found: {path} (source: {source})")
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc


def resolve_credential(source: str, label: str = "credential") -> str:
    """Read a credential value from its source descriptor.

    ``env:VAR`` reads an environment variable, ``file:/path`` reads a file
    (surrounding whitespace stripped, ``~`` expanded) and ``prompt`` asks on
    the terminal without echo.

    Raises:
        ConfigError: If the source is unknown or yields nothing.
    """
    kind, _, location = source.partition(":")
    if kind == "env" and location:
        return _read_env(location, source)
    if kind == "file" and location:
        return _read_file(location, source)
    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(f"Cannot prompt for {label}: stdin is not a TTY (source: prompt)")
        return getpass.getpass(f"Enter {label}: ")
    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_parameters(profile: Profile) -> dict[str, str]:
    """Resolve each of *profile*'s credential sources to its value."""
    return {
        name: resolve_credential(source, label=name)
        for name, source in profile.parameters.items()
    }
