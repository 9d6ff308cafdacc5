"""git-get — extract a directory of any commit from a Git repository."""

__version__ = "0.1.0"
