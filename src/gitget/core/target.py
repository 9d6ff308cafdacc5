"""Target resolver — split ``<location>[@<commit>]`` into a TargetDescriptor.

Accepted shapes:
  /abs/path/repo[.git][/sub/dir]                 local (also ./rel, C:\\...)
  https://host[:port]/owner/repo.git[/sub/dir]   HTTP(S)
  [user@]host:owner/repo.git[/sub/dir]           SCP-style SSH

Nothing in the string marks where the repository ends and the in-repo path
begins, so the boundary is discovered by walking the location from its full
length inward. Locally a ``.git`` extension or a ``.git`` entry marks the
repository root; remotely only the extension can, and a location without
one is taken whole.
"""

from __future__ import annotations

import getpass
import logging
import os
import posixpath
import re
import socket
from collections.abc import Callable
from dataclasses import dataclass

from gitget.core.errors import FilesystemProbeFailure, IdentityLookupFailure, InvalidTarget
from gitget.core.models import HEAD, ROOT, TargetDescriptor

logger = logging.getLogger(__name__)

GIT_EXT = ".git"

# (prefix kept verbatim in the remote, host, remainder)
_HTTP_RE = re.compile(r"(https?://(?:([^:/]+)(?::[0-9]+)?))(.*)")
_SSH_RE = re.compile(r"((?:[^@]+@)?([^:]+):)(.*)")


def _current_user_name() -> str:
    """Full name of the current user, falling back to the login name."""
    try:
        import pwd
    except ImportError:
        return getpass.getuser()

    entry = pwd.getpwuid(os.getuid())
    full_name = entry.pw_gecos.split(",", 1)[0].strip()
    return full_name or entry.pw_name


@dataclass(frozen=True)
class Capabilities:
    """The only I/O the resolver performs; swap these out in tests.

    *stat* must raise ``FileNotFoundError`` (or ``NotADirectoryError``) for
    a missing entry; any other ``OSError`` is reported as a probe failure.
    """

    stat: Callable[[str], object] = os.stat
    hostname: Callable[[], str] = socket.gethostname
    username: Callable[[], str] = _current_user_name
    getcwd: Callable[[], str] = os.getcwd


# ── Classification ──────────────────────────────────────────────────


def is_local(target: str) -> bool:
    """True for filesystem paths; checked before the remote patterns."""
    if target.startswith((os.sep, ".")):
        return True
    return os.path.splitdrive(target)[0] != ""


def split_commit(text: str) -> tuple[str, str]:
    """Split at the last ``@`` into (location, commit); commit defaults to HEAD."""
    lhs, sep, commit = text.rpartition("@")
    if not sep:
        return text, HEAD
    return lhs, commit


def resolve(target: str, caps: Capabilities | None = None) -> TargetDescriptor:
    """Resolve a raw target string.

    Raises InvalidTarget, IdentityLookupFailure or FilesystemProbeFailure;
    nothing is ever guessed for an unrecognised shape.
    """
    caps = caps or Capabilities()
    if not target:
        raise InvalidTarget(target, "empty target")

    if is_local(target):
        desc = _resolve_local(target, caps)
    else:
        for pattern in (_HTTP_RE, _SSH_RE):
            match = pattern.fullmatch(target)
            if match:
                desc = _resolve_remote(*match.groups())
                break
        else:
            raise InvalidTarget(target)

    logger.debug("resolved %r -> %s", target, desc)
    return desc


# ── Local targets ───────────────────────────────────────────────────


def _resolve_local(target: str, caps: Capabilities) -> TargetDescriptor:
    lhs, commit = split_commit(target)
    remote, path = find_local_repo(lhs, caps)
    return TargetDescriptor(
        remote=remote,
        host=_identity(caps.hostname, "local hostname"),
        owner=_identity(caps.username, "current user"),
        name=_local_name(remote),
        commit=commit,
        path=path,
    )


def find_local_repo(location: str, caps: Capabilities) -> tuple[str, str]:
    """Return (repository root, in-repo path) for a filesystem location.

    Relative locations are anchored at the current directory first. The
    filesystem root is the last candidate.
    """
    if not location:
        raise InvalidTarget(location, "empty path")
    if not os.path.isabs(location):
        try:
            location = os.path.join(caps.getcwd(), location)
        except OSError as exc:
            raise FilesystemProbeFailure(location, exc) from exc

    candidate = os.path.normpath(location)
    stripped: list[str] = []
    while True:
        if _extension(os.path.basename(candidate)) == GIT_EXT or _has_git_entry(candidate, caps):
            return candidate, _subpath(stripped)
        parent, tail = os.path.split(candidate)
        if not tail:
            raise InvalidTarget(location, "no git repository found")
        stripped.append(tail)
        candidate = parent


def _local_name(remote: str) -> str:
    # "<tree>/.git" is named after <tree>
    name = _strip_ext(os.path.basename(remote))
    return name or _strip_ext(os.path.basename(os.path.dirname(remote)))


def _has_git_entry(candidate: str, caps: Capabilities) -> bool:
    marker = os.path.join(candidate, GIT_EXT)
    try:
        caps.stat(marker)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        raise FilesystemProbeFailure(marker, exc) from exc
    return True


def _identity(lookup: Callable[[], str], what: str) -> str:
    try:
        return lookup()
    except (OSError, KeyError) as exc:
        raise IdentityLookupFailure(f"cannot determine {what}: {exc}") from exc


# ── Remote targets ──────────────────────────────────────────────────


def _resolve_remote(prefix: str, host: str, rest: str) -> TargetDescriptor:
    lhs, commit = split_commit(rest)
    remote, path = find_remote_repo(lhs)
    owner, name = owner_and_name(remote)
    return TargetDescriptor(
        remote=prefix + remote,
        host=host,
        owner=owner,
        name=name,
        commit=commit,
        path=path,
    )


def find_remote_repo(location: str) -> tuple[str, str]:
    """Return (repository part, in-repo path) of a URL remainder.

    Without a ``.git``-suffixed segment the whole remainder is the
    repository and the path is the root.
    """
    candidate = _clean(location)
    stripped: list[str] = []
    while candidate not in ("", ".", "/"):
        if _extension(posixpath.basename(candidate)) == GIT_EXT:
            return candidate, _subpath(stripped)
        parent, tail = posixpath.split(candidate)
        stripped.append(tail)
        candidate = _clean(parent)
    return location, ROOT


def owner_and_name(remote: str) -> tuple[str, str]:
    """Owner is the parent segment, name the last one minus its extension."""
    cleaned = _clean(remote)
    owner = posixpath.basename(posixpath.dirname(cleaned))
    return owner, _strip_ext(posixpath.basename(cleaned))


# ── String helpers ──────────────────────────────────────────────────


def _clean(path: str) -> str:
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _extension(base: str) -> str:
    i = base.rfind(".")
    return base[i:] if i >= 0 else ""


def _strip_ext(base: str) -> str:
    ext = _extension(base)
    return base[: len(base) - len(ext)] if ext else base


def _subpath(stripped: list[str]) -> str:
    # collected deepest first
    return posixpath.join(ROOT, *reversed(stripped))
