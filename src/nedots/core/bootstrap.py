"""Bootstrap functionality for nedots.

``nedots init`` clones the managed repository, optionally migrates another
user's dots, prepares the backups directory and writes a sample
configuration file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner

from .config import DEFAULT_BACKUP_DIR, DEFAULT_DOTS_DIR, sample_config
from .environment import Environment
from .errors import ConfigError
from .logging import TRACE
from .migrate import migrate_user
from .paths import list_dir, make_all_dirs
from .repository import GitRepository

logger = logging.getLogger(__name__)


class InitManager:
    """Manages first-time setup of the managed repository."""

    def __init__(self, environment: Environment, console: Optional[Console] = None):
        """Initialize init manager."""
        self.environment = environment
        self.console = console or Console()

    @property
    def root_dir(self) -> Path:
        """Where the managed repository is cloned."""
        return self.environment.root_dir

    def clone_root(self, remote: str) -> bool:
        """Clone ``remote`` into the root directory, unless it exists.

        Returns:
            bool: Whether the repository was cloned.
        """
        repo = GitRepository(remote, self.root_dir)
        if repo.exists():
            logger.debug("%s @ %s exists", remote, self.root_dir)
            return False
        if self.root_dir.is_dir() and list_dir(self.root_dir):
            logger.warning("%s is not an empty dir or a Git repository", self.root_dir)
            return False

        logger.log(TRACE, "Initializing %s @ %s...", remote, self.root_dir)
        with Live(Spinner("dots"), console=self.console, refresh_per_second=10) as live:
            live.update(Spinner("dots", f" Initializing {remote} @ {self.root_dir}..."))
            repo.clone()
            repo.init_submodules()
        return True

    def init_config(self) -> Optional[Path]:
        """Write the sample configuration file if there is none.

        Returns:
            Optional[Path]: The file written, or None if one existed.
        """
        config_file = self.environment.default_config_file
        if config_file.exists():
            return None

        logger.log(TRACE, "Creating sample `%s`...", config_file)
        make_all_dirs(config_file.parent)
        try:
            config_file.write_text(sample_config().to_yaml(), encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to write `{config_file}` ({e})") from e

        logger.info("🗒️ Sample config can be found @ %s", config_file)
        return config_file

    def init(self, remote: str, from_user: Optional[str] = None) -> None:
        """Initialize nedots.

        Args:
            remote: Remote of the managed repository.
            from_user: Migrate dots gathered by this user to the current one.

        Raises:
            CommandError: If the clone fails.
            MigrationError: If ``from_user`` has no dots to migrate.
            MakeDirError: If the backups or config directory can't be made.
            ConfigError: If the sample config can't be written.
        """
        self.clone_root(remote)

        if from_user:
            migrate_user(from_user, self.root_dir / DEFAULT_DOTS_DIR, self.environment.home)

        make_all_dirs(self.root_dir / DEFAULT_BACKUP_DIR)
        self.init_config()

        logger.info("✅ Initialized!")
