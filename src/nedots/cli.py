"""Command line interface for nedots."""

from functools import wraps
from typing import Any, Callable, Optional, TypeVar, cast

import click
from click.shell_completion import get_completion_class
from rich.console import Console
from rich.markup import escape

from .core.backup import BackupManager
from .core.bootstrap import InitManager
from .core.clean import CleanManager
from .core.config import DEFAULT_CONFIG, Config, load_config
from .core.environment import Environment
from .core.errors import NedotsError
from .core.install import InstallManager
from .core.logging import setup_logging
from .core.paths import PathResolver
from .core.sync import SyncManager

console = Console()

F = TypeVar("F", bound=Callable[..., Any])


def handle_errors(func: F) -> F:
    """Print nedots and OS errors as a single line and exit with status 1."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (NedotsError, OSError) as e:
            console.print(f"[red]❌ {escape(str(e))}", highlight=False)
            raise click.Abort()

    return cast(F, wrapper)


def get_environment(ctx: click.Context) -> Environment:
    """Return the environment set up by the ``cli`` group."""
    return cast(Environment, ctx.obj["environment"])


def get_config(ctx: click.Context, resolve_sources: bool = True) -> Config:
    """Load the configuration named by ``--config``."""
    return load_config(
        get_environment(ctx), ctx.obj["config_name"], resolve_sources=resolve_sources
    )


@click.group()
@click.option(
    "--config",
    "-c",
    "config_name",
    default=DEFAULT_CONFIG,
    show_default=True,
    help="Custom config file, relative to the user config directory unless it exists as given",
)
@click.option("--verbose", "-v", count=True, help="More output, repeat for trace output")
@click.option("--quiet", "-q", is_flag=True, help="Only print errors")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also log to this file")
@click.version_option(package_name="nedots")
@click.pass_context
def cli(
    ctx: click.Context, config_name: str, verbose: int, quiet: bool, log_file: Optional[str]
) -> None:
    """Personal dotfiles manager.

    nedots tracks configuration files (sources) declared in nedots.yml. It
    copies them into a Git-backed dots directory, syncs that directory with
    a remote and installs them back into the home directory.

    Main commands:

      init      Clone the dots repository & write a sample config
      install   Install files & directories
      backup    Backup local configuration files
      sync      Collect files & directories & sync with remote
      clean     Remove dots and/or backups

    Run 'nedots COMMAND --help' for more information on a specific command.
    """
    setup_logging(verbosity=verbose, quiet=quiet, log_file=log_file)

    ctx.ensure_object(dict)
    ctx.obj.setdefault("environment", Environment.from_system())
    ctx.obj["config_name"] = config_name


@cli.command()
@click.argument("key", required=False)
@click.option(
    "--exact",
    is_flag=True,
    help="Match KEY against whole path segments only and fail if it is ambiguous",
)
@click.pass_context
@handle_errors
def install(ctx: click.Context, key: Optional[str], exact: bool) -> None:
    """Install files & directories.

    KEY selects a single source to install. Any unique portion of a path in
    `sources` is valid, e.g. given [".bashrc", ".config/bspwm"], both
    ".bashrc" and "bspwm" may be used as a key.

    Without KEY, every source is installed and every nested repository in
    `git_repos` is cloned.

    Examples:

      # Install everything
      nedots install

      # Install only ~/.config/bspwm
      nedots install bspwm
    """
    environment = get_environment(ctx)
    config = get_config(ctx, resolve_sources=False)
    InstallManager(config, PathResolver(environment)).install(key, exact=exact)


@cli.command()
@click.pass_context
@handle_errors
def backup(ctx: click.Context) -> None:
    """Backup local configuration files.

    Every source is copied into backups/TIMESTAMP, where TIMESTAMP is the
    current Unix time.
    """
    environment = get_environment(ctx)
    BackupManager(get_config(ctx), PathResolver(environment)).backup()


@cli.command()
@click.option("--dots", "-d", is_flag=True, help="Clean up the dots directory")
@click.option("--backups", "-b", is_flag=True, help="Clean up the backups directory")
@click.option(
    "--assumeyes", "-y", is_flag=True, help="Don't prompt for confirmation when cleaning"
)
@click.pass_context
@handle_errors
def clean(ctx: click.Context, dots: bool, backups: bool, assumeyes: bool) -> None:
    """Remove dots and/or backups.

    The selected directories are deleted and recreated empty.

    Examples:

      # Start over with an empty backups directory, without prompting
      nedots clean --backups --assumeyes
    """
    CleanManager(get_config(ctx), console=console).clean(
        dots=dots, backups=backups, assume_yes=assumeyes
    )


@cli.command()
@click.option("--gather", "-g", is_flag=True, help="Gather dots before syncing")
@click.option("--nopush", "-n", is_flag=True, help="Don't push to remote, useful for testing")
@click.pass_context
@handle_errors
def sync(ctx: click.Context, gather: bool, nopush: bool) -> None:
    """Collect files & directories & sync with remote.

    Every nested repository and then the dots repository itself is added,
    committed, pulled and pushed.
    """
    SyncManager(get_config(ctx), console=console).sync(gather=gather, push=not nopush)


@cli.command()
@click.argument("remote")
@click.option("--from-user", "-f", help="Migrate dots gathered by this user")
@click.pass_context
@handle_errors
def init(ctx: click.Context, remote: str, from_user: Optional[str]) -> None:
    """Initialize nedots.

    REMOTE is the Git repository holding your dots. It is cloned into the
    user data directory, unless already there.

    Example:

      nedots init git@git.sr.ht:~nedia/nedots --from-user olduser
    """
    InitManager(get_environment(ctx), console=console).init(remote, from_user=from_user)


@cli.command()
@click.argument("shell", type=click.Choice(["bash", "zsh", "fish"]))
def completions(shell: str) -> None:
    """Generate shell completions.

    Example:

      nedots completions bash > ~/.local/share/bash-completion/completions/nedots
    """
    completion_class = get_completion_class(shell)
    if completion_class is None:
        raise click.BadParameter(f"Unsupported shell: {shell}")
    click.echo(completion_class(cli, {}, "nedots", "_NEDOTS_COMPLETE").source())


def main() -> None:
    """Entry point for the nedots CLI."""
    cli()


if __name__ == "__main__":
    main()
