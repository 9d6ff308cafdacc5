"""Copy the selected subtree of a checkout into the destination."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from gitget.core.excludes import ExcludeMatcher

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
_GIT_META = ".git"


def subtree(checkout: Path, path: str) -> Path:
    """Filesystem location of repo-absolute *path* inside *checkout*."""
    parts = [p for p in path.split("/") if p]
    return checkout.joinpath(*parts)


def copy_tree(checkout: Path, path: str, dest: Path, exclude: ExcludeMatcher | None = None) -> int:
    """Copy ``checkout/path`` to *dest* and return the number of files copied.

    Excluded directories are pruned with everything below them. The
    checkout's own ``.git`` is never copied.
    """
    exclude = exclude or ExcludeMatcher([])
    src = subtree(checkout, path)
    if not src.exists():
        raise FileNotFoundError(f"Path '{path}' not found in checkout")

    if src.is_file():
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest, follow_symlinks=False)
        return 1

    dest.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    copied = 0
    for dirpath, dirnames, filenames in os.walk(src):
        current = Path(dirpath)
        rel_dir = current.relative_to(src)
        if current == checkout and _GIT_META in dirnames:
            dirnames.remove(_GIT_META)

        kept: list[str] = []
        for name in sorted(dirnames):
            rel = (rel_dir / name).as_posix()
            if exclude.matches(rel, is_dir=True):
                logger.debug("exclude %s/", rel)
                continue
            target = dest / rel_dir / name
            if (current / name).is_symlink():
                _copy_link(current / name, target)
                copied += 1
                continue
            target.mkdir(mode=DIR_MODE, exist_ok=True)
            kept.append(name)
        dirnames[:] = kept

        for name in sorted(filenames):
            rel = (rel_dir / name).as_posix()
            if exclude.matches(rel):
                logger.debug("exclude %s", rel)
                continue
            target = dest / rel_dir / name
            if (current / name).is_symlink():
                _copy_link(current / name, target)
            else:
                shutil.copy2(current / name, target)
            copied += 1

    logger.info("copied %d file(s) from %s to %s", copied, src, dest)
    return copied


def _copy_link(source: Path, target: Path) -> None:
    os.symlink(os.readlink(source), target)
