"""Data shapes for resolved targets and command settings."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field

HEAD = "HEAD"
ROOT = "/"


# ── Target layer ────────────────────────────────────────────────────


@dataclass(frozen=True)
class TargetDescriptor:
    """A target string split into repository, commit and in-repo path.

    ``remote`` is what git clones from; ``host``/``owner``/``name`` key the
    cache mirror; ``path`` is repo-absolute and ``/`` for the whole tree.
    """

    remote: str
    host: str
    owner: str
    name: str
    commit: str = HEAD
    path: str = ROOT

    @property
    def is_root(self) -> bool:
        return self.path == ROOT

    def default_dest(self) -> str:
        """Directory name used when the user gives no destination."""
        if self.is_root:
            return self.name
        return posixpath.basename(self.path)


# ── Settings layer ──────────────────────────────────────────────────


@dataclass
class Settings:
    """Effective option values after CLI, env and config-file merging."""

    cache_dir: str
    force: bool = False
    exclude: list[str] = field(default_factory=list)
    log_level: str = "WARNING"
