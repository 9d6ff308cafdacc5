"""CLI entry point — the `git-get` Click command."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from click.shell_completion import CompletionItem

from gitget import __version__
from gitget.cli.ui import spinner
from gitget.core import paths
from gitget.core.env import envvar, load_user_env
from gitget.core.errors import GitGetError
from gitget.core.models import Settings
from gitget.repo import config

load_user_env()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

TARGET_COMPLETIONS = (
    "git@github.com:",
    "https://",
    "https://github.com/",
)

EXAMPLES = """\b
Examples:
  git-get https://github.com/owner/repo.git/docs
  git-get https://github.com/owner/repo.git/src/lib@v1.2.0 vendor/lib
  git-get git@github.com:owner/repo.git@1a2b3c5 snapshot
  git-get ./checkouts/repo/path/to/dir@main -e '*.log' -e 'build/'
"""


class PatternType(click.ParamType):
    """Exclusion pattern; GIT_GET_EXCLUDE is split on commas."""

    name = "pattern"
    envvar_list_splitter = ","


class GitGetCommand(click.Command):
    """Click command whose defaults come from the user's config.toml."""

    def make_context(self, info_name, args, parent=None, **extra):
        if "default_map" not in extra:
            try:
                extra["default_map"] = config.load(paths.config_path())
            except GitGetError as exc:
                raise click.ClickException(str(exc)) from exc
        return super().make_context(info_name, args, parent=parent, **extra)


def _complete_target(ctx: click.Context, param: click.Parameter, incomplete: str) -> list[str]:
    return [c for c in TARGET_COMPLETIONS if c.startswith(incomplete)]


def _complete_dir(ctx: click.Context, param: click.Parameter, incomplete: str) -> list[CompletionItem]:
    return [CompletionItem(incomplete, type="dir")]


def _split_patterns(values: tuple[str, ...]) -> list[str]:
    return [p for value in values for p in value.split(",") if p]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("gitget").setLevel(level.upper())


@click.command(
    cls=GitGetCommand,
    epilog=EXAMPLES,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("target", required=False, shell_complete=_complete_target)
@click.argument("dest", metavar="[DIR]", required=False, shell_complete=_complete_dir)
@click.option(
    "-d", "--cache-dir", metavar="DIR",
    type=click.Path(file_okay=False, path_type=Path),
    default=lambda: str(paths.default_cache_dir()),
    envvar=envvar("cache-dir"), show_envvar=True,
    help="Cache directory for bare mirrors and scratch checkouts.",
)
@click.option(
    "-f", "--force", is_flag=True,
    envvar=envvar("force"), show_envvar=True,
    help="Overwrite the destination if it exists.",
)
@click.option(
    "-e", "--exclude", multiple=True, type=PatternType(),
    envvar=envvar("exclude"), show_envvar=True,
    help=(
        "Exclude paths matching PATTERN (repeatable, comma-separated). Patterns "
        "follow .gitignore rules: without a slash they match at any depth, a "
        "leading '/' anchors them to the extracted directory, '!' re-includes."
    ),
)
@click.option(
    "--log-level", default="WARNING", show_default=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar=envvar("log-level"), show_envvar=True,
    help="Log verbosity on stderr.",
)
@click.option("--print-config", is_flag=True, help="Print the effective settings as TOML and exit.")
@click.version_option(__version__, prog_name="git-get")
def cli(
    target: str | None,
    dest: str | None,
    cache_dir: Path,
    force: bool,
    exclude: tuple[str, ...],
    log_level: str,
    print_config: bool,
) -> None:
    """Extract a directory or file of any commit from a Git repository.

    TARGET is <repository>[/<path>][@<commit>] where <repository> is a local
    path, an http(s):// URL or a [user@]host:owner/repo address. The
    repository ends at the first segment named *.git (or, locally, holding
    a .git entry); <commit> defaults to HEAD.

    DIR defaults to the last segment of <path>, or the repository name.
    """
    _configure_logging(log_level)
    patterns = _split_patterns(exclude)

    if print_config:
        settings = Settings(
            cache_dir=str(cache_dir), force=force, exclude=patterns, log_level=log_level.upper(),
        )
        click.echo(config.dump(settings), nl=False)
        return

    if not target:
        raise click.UsageError("Missing argument 'TARGET'.")

    from gitget.services import extract

    logging.getLogger(__name__).info(
        "%s cache_dir=%s force=%s exclude=%s", target, cache_dir, force, patterns,
    )
    try:
        with spinner() as status:
            result = extract.extract(
                target, dest,
                cache_dir=Path(cache_dir), force=force, exclude=patterns,
                on_progress=status,
            )
    except (GitGetError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f'get "{target}" to "{result.dest}"')
    desc = result.target
    summary = f"✔ Extracted {result.files} file(s) from {desc.remote}@{desc.commit}:{desc.path}"
    if result.sha:
        summary += f" ({result.sha[:12]})"
    click.echo(summary)
