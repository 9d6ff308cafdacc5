"""Extraction service — implements `git-get <target> [<dir>]`."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from gitget.core import paths
from gitget.core.errors import DestinationExists, UnsafeDestination
from gitget.core.excludes import ExcludeMatcher
from gitget.core.models import TargetDescriptor
from gitget.core.target import Capabilities, resolve
from gitget.fetchers import git, tree

logger = logging.getLogger(__name__)


@dataclass
class ExtractResult:
    """What one extraction produced."""
    target: TargetDescriptor
    dest: Path
    files: int
    cloned: bool = False
    sha: str = ""


def destination(desc: TargetDescriptor, explicit: str | None = None) -> Path:
    """Destination directory, relative to the working directory.

    Absolute names lose their drive and leading separators. A destination
    that is the working directory or one of its parents raises
    UnsafeDestination.
    """
    name = explicit or desc.default_dest()
    name = os.path.splitdrive(name)[1].lstrip("/" + os.sep)
    out = Path(os.path.normpath(os.path.join(os.curdir, name)))

    here = Path.cwd().resolve()
    resolved = out.resolve()
    if resolved == here or resolved in here.parents:
        raise UnsafeDestination(str(out))
    return out


def extract(
    target: str,
    dest: str | None = None,
    *,
    cache_dir: Path,
    force: bool = False,
    exclude: Iterable[str] = (),
    caps: Capabilities | None = None,
    on_progress: Callable[[str], None] | None = None,
) -> ExtractResult:
    """Resolve *target*, refresh its cache mirror and copy the subtree out.

    Everything that can be rejected without running git (bad patterns, bad
    target, unsafe or existing destination) is checked first.
    """
    emit = on_progress or (lambda _msg: None)

    matcher = ExcludeMatcher.from_patterns(exclude)
    desc = resolve(target, caps)
    out = destination(desc, dest)
    if out.exists() or out.is_symlink():
        if not force:
            raise DestinationExists(str(out))
        logger.info("overwriting %s", out)

    repo_dir = paths.repo_dir(cache_dir, desc.host, desc.owner, desc.name)
    logger.info("target %s, mirror %s", desc, repo_dir)

    emit(f"Syncing {desc.remote}…")
    cloned = git.sync_mirror(desc.remote, repo_dir)

    works = paths.works_dir(cache_dir)
    works.mkdir(parents=True, exist_ok=True)
    work_dir = Path(tempfile.mkdtemp(dir=works))
    try:
        emit(f"Checking out {desc.commit}…")
        sha = git.checkout(repo_dir, work_dir, desc.commit) or ""

        emit(f"Copying {desc.path} to {out}…")
        _remove(out)
        files = tree.copy_tree(work_dir, desc.path, out, matcher)
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)

    return ExtractResult(target=desc, dest=out, files=files, cloned=cloned, sha=sha)


def _remove(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)
