"""Error taxonomy shared by the resolver, the git driver and the CLI."""

from __future__ import annotations


class GitGetError(Exception):
    """Base class for every failure git-get reports to the user."""


class InvalidTarget(GitGetError, ValueError):
    """The target string names no recognisable repository."""

    def __init__(self, target: str, reason: str = "invalid target"):
        self.target = target
        self.reason = reason
        super().__init__(f"{target!r}, {reason}")


class IdentityLookupFailure(GitGetError):
    """Local hostname or current user could not be determined."""


class FilesystemProbeFailure(GitGetError):
    """Probing for a repository marker failed for a reason other than absence."""

    def __init__(self, path: str, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"cannot probe {path!r}: {error.strerror or error}")


class GitCommandError(GitGetError, RuntimeError):
    """A git subprocess exited non-zero."""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"{' '.join(command)} failed: {detail}")


class DestinationExists(GitGetError, FileExistsError):
    """Destination is already present and overwriting was not requested."""

    def __init__(self, dest: str):
        self.dest = dest
        super().__init__(f"{dest!r}, file already exists")


class BadPattern(GitGetError, ValueError):
    """An exclusion pattern is not a valid glob."""

    def __init__(self, pattern: str, reason: str = "syntax error in pattern"):
        self.pattern = pattern
        super().__init__(f"{pattern!r}, {reason}")


class ConfigError(GitGetError, ValueError):
    """config.toml cannot be parsed or holds a value of the wrong type."""


class UnsafeDestination(GitGetError, ValueError):
    """Destination would replace the working directory or one of its parents."""

    def __init__(self, dest: str):
        self.dest = dest
        super().__init__(f"{dest!r}, refusing to overwrite the working directory")
