"""Drive the git binary: bare mirror in the cache, scratch checkout per run."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from gitget.core.errors import GitCommandError

logger = logging.getLogger(__name__)

GIT = "git"
MIRROR_REFSPECS = ["+refs/heads/*:refs/heads/*", "+refs/tags/*:refs/tags/*"]


def _run(args: list[str], **kwargs) -> subprocess.CompletedProcess:
    logger.debug("run %s", " ".join(args))
    try:
        r = subprocess.run(args, capture_output=True, text=True, **kwargs)
    except FileNotFoundError as exc:
        raise GitCommandError(args, 127, f"{exc.filename or args[0]}: {exc.strerror or 'not found'}") from exc
    if r.returncode != 0:
        raise GitCommandError(args, r.returncode, r.stderr)
    return r


def clone_bare(remote: str, repo_dir: Path) -> None:
    """Create the cache mirror of *remote*."""
    repo_dir.parent.mkdir(parents=True, exist_ok=True)
    _run([GIT, "clone", "--bare", remote, str(repo_dir)])


def fetch_all(repo_dir: Path) -> None:
    """Bring every branch and tag of the mirror up to date with origin."""
    # a bare clone has no fetch refspec of its own
    _run([GIT, "--git-dir", str(repo_dir), "fetch", "--prune", "origin", *MIRROR_REFSPECS])


def sync_mirror(remote: str, repo_dir: Path) -> bool:
    """Clone the mirror when missing, otherwise fetch. Returns True on clone."""
    if repo_dir.is_symlink() or repo_dir.exists():
        logger.info("fetching %s into %s", remote, repo_dir)
        fetch_all(repo_dir)
        return False
    logger.info("cloning %s into %s", remote, repo_dir)
    clone_bare(remote, repo_dir)
    return True


def checkout(repo_dir: Path, work_dir: Path, commit: str) -> str:
    """Materialise *commit* of the mirror in *work_dir* (detached HEAD).

    Returns the full object name the commit resolved to.
    """
    _run([GIT, "clone", "--no-checkout", str(repo_dir), str(work_dir)])
    _run([GIT, "switch", "--detach", commit], cwd=work_dir)
    return rev_parse(work_dir)


def rev_parse(work_dir: Path, rev: str = "HEAD") -> str:
    r = _run([GIT, "rev-parse", rev], cwd=work_dir)
    return r.stdout.strip()
