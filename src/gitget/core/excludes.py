"""Exclusion patterns applied while copying the extracted tree."""

from __future__ import annotations

from collections.abc import Iterable

import pathspec

from gitget.core.errors import BadPattern


def _trailing_escape(pattern: str) -> bool:
    stripped = pattern.rstrip("\\")
    return (len(pattern) - len(stripped)) % 2 == 1


class ExcludeMatcher:
    """Gitignore-style matcher over paths relative to the extracted subtree."""

    def __init__(self, patterns: list[str], spec: pathspec.PathSpec | None = None):
        self.patterns = patterns
        self._spec = spec

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "ExcludeMatcher":
        """Validate *patterns* up front; blank entries are dropped."""
        kept = [p.strip() for p in patterns if p and p.strip()]
        for pattern in kept:
            if _trailing_escape(pattern):
                raise BadPattern(pattern, "trailing backslash escapes nothing")
            try:
                pathspec.GitIgnoreSpec.from_lines([pattern])
            except ValueError as exc:
                raise BadPattern(pattern, str(exc)) from exc
        if not kept:
            return cls([])
        return cls(kept, pathspec.GitIgnoreSpec.from_lines(kept))

    def matches(self, rel_path: str, *, is_dir: bool = False) -> bool:
        if self._spec is None or rel_path in ("", "."):
            return False
        if is_dir and not rel_path.endswith("/"):
            rel_path += "/"
        return self._spec.match_file(rel_path)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __repr__(self) -> str:
        return f"ExcludeMatcher({self.patterns!r})"
