from pathlib import Path
from unittest.mock import patch

import pytest

from gitget.core.errors import (
    BadPattern,
    DestinationExists,
    GitCommandError,
    InvalidTarget,
    UnsafeDestination,
)
from gitget.core.models import TargetDescriptor
from gitget.services import extract

REMOTE = "https://github.com/abcdefg/repo.git"


def _fake_checkout(repo_dir, work_dir, commit):
    (work_dir / ".git").mkdir()
    (work_dir / "README.md").write_text("readme")
    (work_dir / "docs").mkdir()
    (work_dir / "docs" / "index.md").write_text(commit)
    (work_dir / "docs" / "draft.tmp").write_text("wip")


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_destination_defaults():
    root = TargetDescriptor(remote=REMOTE, host="github.com", owner="abcdefg", name="repo")
    sub = TargetDescriptor(remote=REMOTE, host="github.com", owner="abcdefg", name="repo", path="/a/b")
    assert extract.destination(root) == Path("repo")
    assert extract.destination(sub) == Path("b")
    assert extract.destination(sub, "out/./x/") == Path("out/x")


@patch("gitget.fetchers.git.checkout", side_effect=_fake_checkout)
@patch("gitget.fetchers.git.sync_mirror", return_value=True)
def test_extract_subdirectory(mock_sync, mock_checkout, workdir, caps):
    cache = workdir / "cache"
    messages = []
    result = extract.extract(
        f"{REMOTE}/docs@v1", cache_dir=cache, caps=caps, on_progress=messages.append,
    )

    assert result.dest == Path("docs")
    assert result.files == 2
    assert result.cloned is True
    assert (workdir / "docs" / "index.md").read_text() == "v1"
    mock_sync.assert_called_once_with(REMOTE, cache / "repos" / "github.com" / "abcdefg" / "repo")
    assert mock_checkout.call_args[0][2] == "v1"
    assert list((cache / "works").iterdir()) == []
    assert messages[0] == f"Syncing {REMOTE}…"


@patch("gitget.fetchers.git.checkout", side_effect=_fake_checkout)
@patch("gitget.fetchers.git.sync_mirror", return_value=False)
def test_extract_root_to_explicit_dir_with_excludes(mock_sync, mock_checkout, workdir, caps):
    result = extract.extract(
        REMOTE, "vendor/repo", cache_dir=workdir / "cache", exclude=["*.tmp"], caps=caps,
    )
    out = workdir / "vendor" / "repo"
    assert result.dest == Path("vendor/repo")
    assert (out / "README.md").exists()
    assert not (out / "docs" / "draft.tmp").exists()
    assert not (out / ".git").exists()


@patch("gitget.fetchers.git.sync_mirror")
def test_existing_destination_requires_force(mock_sync, workdir, caps):
    (workdir / "docs").mkdir()
    with pytest.raises(DestinationExists):
        extract.extract(f"{REMOTE}/docs", cache_dir=workdir / "cache", caps=caps)
    mock_sync.assert_not_called()


@patch("gitget.fetchers.git.checkout", side_effect=_fake_checkout)
@patch("gitget.fetchers.git.sync_mirror", return_value=False)
def test_force_replaces_destination(mock_sync, mock_checkout, workdir, caps):
    (workdir / "docs").mkdir()
    (workdir / "docs" / "stale.txt").write_text("old")
    extract.extract(f"{REMOTE}/docs", cache_dir=workdir / "cache", force=True, caps=caps)
    assert not (workdir / "docs" / "stale.txt").exists()
    assert (workdir / "docs" / "index.md").exists()


@patch("gitget.fetchers.git.checkout")
@patch("gitget.fetchers.git.sync_mirror", return_value=False)
def test_failed_checkout_cleans_scratch_dir(mock_sync, mock_checkout, workdir, caps):
    mock_checkout.side_effect = GitCommandError(["git", "switch"], 128, "fatal: invalid reference: nope")
    cache = workdir / "cache"
    with pytest.raises(GitCommandError, match="invalid reference"):
        extract.extract(f"{REMOTE}@nope", cache_dir=cache, caps=caps)
    assert list((cache / "works").iterdir()) == []
    assert not (workdir / "repo").exists()


@patch("gitget.fetchers.git.sync_mirror")
def test_bad_pattern_fails_before_git(mock_sync, workdir, caps):
    with pytest.raises(BadPattern):
        extract.extract(REMOTE, cache_dir=workdir / "cache", exclude=["oops\\"], caps=caps)
    mock_sync.assert_not_called()


@patch("gitget.fetchers.git.sync_mirror")
def test_invalid_target_fails_before_git(mock_sync, workdir, caps):
    with pytest.raises(InvalidTarget):
        extract.extract("not-a-target", cache_dir=workdir / "cache", caps=caps)
    mock_sync.assert_not_called()


def test_absolute_destination_stays_below_cwd(workdir):
    desc = TargetDescriptor(remote=REMOTE, host="github.com", owner="abcdefg", name="repo")
    assert extract.destination(desc, "/srv/out") == Path("srv/out")
    assert extract.destination(desc, "//srv/out/") == Path("srv/out")


@pytest.mark.parametrize("explicit", [".", "./", "..", "a/..", "/", "../.."])
def test_destination_refuses_cwd_and_parents(explicit, workdir):
    desc = TargetDescriptor(remote=REMOTE, host="github.com", owner="abcdefg", name="repo")
    with pytest.raises(UnsafeDestination):
        extract.destination(desc, explicit)


@patch("gitget.fetchers.git.sync_mirror")
@pytest.mark.parametrize("explicit", [".", "/"])
def test_force_never_removes_cwd(mock_sync, explicit, workdir, caps):
    (workdir / "precious.txt").write_text("keep")
    with pytest.raises(UnsafeDestination):
        extract.extract(REMOTE, explicit, cache_dir=workdir / "cache", force=True, caps=caps)
    assert (workdir / "precious.txt").read_text() == "keep"
    mock_sync.assert_not_called()


@patch("gitget.fetchers.git.checkout", side_effect=_fake_checkout)
@patch("gitget.fetchers.git.sync_mirror", return_value=True)
def test_git_dir_target_is_named_after_its_tree(mock_sync, mock_checkout, workdir, caps):
    (workdir / "precious.txt").write_text("keep")
    result = extract.extract(
        "/home/abcdefg/documents/proj/.git", cache_dir=workdir / "cache", force=True, caps=caps,
    )
    assert result.target.name == "proj"
    assert result.dest == Path("proj")
    assert (workdir / "proj" / "README.md").exists()
    assert (workdir / "precious.txt").read_text() == "keep"
    assert mock_sync.call_args[0][1].name == "proj"
