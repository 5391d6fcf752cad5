"""Git repository functionality for nedots."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Union

from .errors import CommandError
from .logging import TRACE, console_enabled_for

logger = logging.getLogger(__name__)


def run_command(args: List[str]) -> str:
    """Run an external command and return its stdout.

    On failure, ``stderr`` is forwarded to the user. ``stdout`` is forwarded
    as well when the console shows TRACE output.

    Raises:
        CommandError: If the command can't be started or exits non-zero.
    """
    logger.log(TRACE, "`%s`...", " ".join(args))
    try:
        result = subprocess.run(args, capture_output=True, text=True, check=False)
    except OSError as e:
        raise CommandError(args, stderr=str(e)) from e

    if result.returncode != 0:
        if result.stderr:
            print(result.stderr.rstrip(), file=sys.stderr)
        if console_enabled_for(TRACE) and result.stdout:
            print(result.stdout.rstrip())
        raise CommandError(args, stderr=result.stderr, stdout=result.stdout)

    return result.stdout.strip()


class GitRepository:
    """A Git repository nedots keeps in sync with its remote.

    Used both for the root repository holding the dots & backups and for
    nested repositories declared under ``git_repos``.

    Attributes:
        remote (str): Remote to clone from, pull from and push to.
        path (Path): Local working tree.
    """

    def __init__(self, remote: str, path: Union[str, Path]):
        """Initialize repository."""
        self.remote = remote
        self.path = Path(path)

    def __str__(self) -> str:
        """Return string representation."""
        return f"GitRepository({self.remote} @ {self.path})"

    def __repr__(self) -> str:
        """Return string representation."""
        return self.__str__()

    def _run_git(self, *args: str) -> str:
        """Run a Git command inside the working tree."""
        return run_command(["git", "-C", str(self.path), *args])

    def exists(self) -> bool:
        """Check if the working tree exists and is a Git repository."""
        if not self.path.is_dir():
            return False
        try:
            self._run_git("rev-parse", "--git-dir")
            return True
        except CommandError:
            return False

    def clone(self) -> None:
        """Clone ``remote`` into ``path``.

        Raises:
            CommandError: If the clone fails, e.g. ``path`` isn't empty.
        """
        run_command(["git", "clone", self.remote, str(self.path)])

    def init_submodules(self) -> None:
        """Check out every submodule, recursively."""
        self._run_git("submodule", "update", "--init", "--recursive")

    def add(self, pattern: str = ".") -> None:
        """Stage files matching ``pattern``."""
        self._run_git("add", pattern)

    def commit(self, message: str) -> None:
        """Commit staged changes.

        ``git commit`` fails when there is nothing to commit, which is
        expected on most syncs, so a failure is only logged.
        """
        try:
            self._run_git("commit", "-m", message)
        except CommandError as e:
            logger.log(TRACE, "Expected `git commit` to error and it did, moving on... (%s)", e)

    def pull(self) -> None:
        """Pull from the tracked remote branch."""
        self._run_git("pull")

    def push(self) -> None:
        """Push to the tracked remote branch."""
        self._run_git("push")
