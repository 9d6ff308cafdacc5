import logging
import os

import pytest
from click.testing import CliRunner

from gitget.core.target import Capabilities


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the user's real config, cache and GIT_GET_* variables out of tests."""
    for key in list(os.environ):
        if key.startswith("GIT_GET_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))


@pytest.fixture
def runner():
    """Click CLI runner fixture."""
    return CliRunner()


def _stat(name):
    # a directory literally named "repo" holds a .git entry
    if os.path.basename(os.path.dirname(os.path.normpath(name))) == "repo":
        return None
    raise FileNotFoundError(name)


@pytest.fixture
def caps():
    """Resolver capabilities with a fake filesystem and identity."""
    return Capabilities(
        stat=_stat,
        hostname=lambda: "git.example",
        username=lambda: "gecos",
        getcwd=lambda: "/home/abcdefg/documents",
    )


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger("gitget").setLevel(logging.NOTSET)
