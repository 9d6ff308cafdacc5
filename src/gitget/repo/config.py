"""Repository for the user's config.toml read/write."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from gitget.core.errors import ConfigError
from gitget.core.models import Settings

# key -> (expected type, human name)
_KEYS: dict[str, tuple[type, str]] = {
    "cache_dir": (str, "a string"),
    "force": (bool, "a boolean"),
    "exclude": (list, "an array of strings"),
    "log_level": (str, "a string"),
}


def load(path: Path) -> dict[str, Any]:
    """Read *path* into a click ``default_map``; a missing file yields ``{}``."""
    if not path.is_file():
        return {}

    try:
        raw = tomlkit.parse(path.read_text()).unwrap()
    except ParseError as exc:
        raise ConfigError(f"{path}: {exc}") from exc

    defaults: dict[str, Any] = {}
    for key, (kind, label) in _KEYS.items():
        if key not in raw:
            continue
        value = raw[key]
        if not isinstance(value, kind):
            raise ConfigError(f"{path}: '{key}' must be {label}")
        if kind is list:
            if not all(isinstance(item, str) for item in value):
                raise ConfigError(f"{path}: '{key}' must be {label}")
            value = list(value)
        if key == "cache_dir":
            value = str(Path(value).expanduser())
        defaults[key] = value
    return defaults


# ── Serialization ───────────────────────────────────────────────────


def dump(settings: Settings) -> str:
    """Serialize effective settings to a TOML string."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("git-get configuration"))
    doc.add(tomlkit.nl())
    doc.add("cache_dir", settings.cache_dir)
    doc.add("force", settings.force)
    doc.add("exclude", list(settings.exclude))
    doc.add("log_level", settings.log_level)
    return tomlkit.dumps(doc)
