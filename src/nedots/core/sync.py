"""Sync functionality for nedots."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner

from .config import Config
from .copy import copy
from .errors import CommandError, SyncError
from .paths import mirror_path
from .repository import GitRepository

logger = logging.getLogger(__name__)


class SyncManager:
    """Gathers sources into the dots directory and syncs every repository.

    Attributes:
        config (Config): Resolved configuration.
        console (Console): Rich console the spinner is drawn on.
    """

    def __init__(self, config: Config, console: Optional[Console] = None) -> None:
        """Initialize sync manager."""
        self.config = config
        self.console = console or Console()

    def gather(self) -> List[Path]:
        """Copy every source into the dots directory.

        Returns:
            List[Path]: Destinations inside the dots directory.
        """
        gathered = []
        with Live(Spinner("dots"), console=self.console, refresh_per_second=10) as live:
            live.update(Spinner("dots", " Gathering source files & directories..."))
            for source in self.config.sources:
                dst = mirror_path(self.config.dots_dir, source)
                copy(source, dst)
                gathered.append(dst)
        return gathered

    def sync_repo(self, repo: GitRepository, push: bool = True) -> None:
        """Add, commit, pull and optionally push one repository.

        Raises:
            CommandError: If any git step other than commit fails.
        """
        with Live(Spinner("dots"), console=self.console, refresh_per_second=10) as live:
            live.update(Spinner("dots", f" Adding latest changes... {repo.path}"))
            repo.add(".")

            live.update(Spinner("dots", f" Committing latest changes... {repo.path}"))
            repo.commit(f"Latest {datetime.now()}")

            live.update(Spinner("dots", f" Pulling latest changes... {repo.remote}"))
            repo.pull()

            if push:
                live.update(Spinner("dots", f" Pushing to remote... {repo.remote}"))
                repo.push()

    def sync(self, gather: bool = False, push: bool = True) -> None:
        """Sync nested repositories, then the root repository.

        A nested repository that fails is logged and the others are still
        synced; the root repository is synced last.

        Args:
            gather: Copy sources into the dots directory first.
            push: Push to the remotes (default: True).

        Raises:
            SyncError: If any repository failed to sync.
        """
        if gather:
            self.gather()

        failed: List[Path] = []
        for git_repo in self.config.git_repos:
            try:
                self.sync_repo(GitRepository(git_repo.remote, git_repo.path), push)
            except CommandError as e:
                logger.error("❌ %s", e)
                failed.append(git_repo.path)

        root = GitRepository(self.config.remote, self.config.root)
        try:
            self.sync_repo(root, push)
        except CommandError as e:
            raise SyncError(failed + [root.path], e) from e

        if failed:
            raise SyncError(failed)

        logger.info("✅ Synced!")
