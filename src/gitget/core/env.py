"""Runtime environment helpers."""

from __future__ import annotations

import os
from pathlib import Path

from gitget.core import paths

ENV_PREFIX = "GIT_GET"

_USER_ENV_LOADED = False


def envvar(option: str) -> str:
    """Environment variable backing *option*: cache-dir -> GIT_GET_CACHE_DIR."""
    return f"{ENV_PREFIX}_{option.replace('-', '_').upper()}"


def load_user_env() -> None:
    """Load user-level git-get env files without overriding existing vars."""
    global _USER_ENV_LOADED
    if _USER_ENV_LOADED:
        return

    for env_file in _candidate_env_files():
        _load_env_file(env_file)

    _USER_ENV_LOADED = True


def _candidate_env_files() -> list[Path]:
    files: list[Path] = []
    env_override = os.environ.get(envvar("env-file"), "").strip()
    if env_override:
        files.append(Path(env_override).expanduser())

    try:
        base = paths.config_dir()
    except RuntimeError:
        return files
    files.extend([base / "env", base / ".env"])
    return files


def _load_env_file(path: Path) -> None:
    if not path.exists() or not path.is_file():
        return

    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ[key] = value
