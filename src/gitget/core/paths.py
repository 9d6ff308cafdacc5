"""Cache and config locations."""

from __future__ import annotations

import os
import sys
from pathlib import Path

APP_DIR = "git-get"
REPOS_DIR = "repos"
WORKS_DIR = "works"
CONFIG_TOML = "config.toml"


def _user_cache_dir() -> Path | None:
    if sys.platform == "win32":
        local = os.environ.get("LOCALAPPDATA", "").strip()
        return Path(local) if local else None
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"
    return Path.home() / ".cache"


def default_cache_dir() -> Path:
    """XDG_CACHE_HOME, then the platform cache dir, then ~/.cache, then ./.cache."""
    xdg = os.environ.get("XDG_CACHE_HOME", "").strip()
    if xdg:
        return Path(xdg) / APP_DIR
    try:
        base = _user_cache_dir()
        if base is not None:
            return base / APP_DIR
        return Path.home() / ".cache" / APP_DIR
    except RuntimeError:
        # Path.home() cannot resolve a home directory
        return Path(".cache") / APP_DIR


def config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    if xdg:
        return Path(xdg) / APP_DIR
    return Path.home() / ".config" / APP_DIR


def config_path() -> Path:
    return config_dir() / CONFIG_TOML


def repo_dir(cache: Path, host: str, owner: str, name: str) -> Path:
    """Bare mirror location for one repository."""
    return cache / REPOS_DIR / host / owner / name


def works_dir(cache: Path) -> Path:
    return cache / WORKS_DIR
