"""Clean functionality for nedots.

Removes the dots and/or backups directories and recreates them empty, for
when a clean slate is needed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .config import Config
from .paths import make_all_dirs, remove_all_dirs

logger = logging.getLogger(__name__)


class CleanManager:
    """Clean manager class."""

    def __init__(self, config: Config, console: Optional[Console] = None) -> None:
        """Initialize clean manager."""
        self.config = config
        self.console = console or Console()

    def confirm(self, what: str) -> bool:
        """Ask the user before deleting ``what``."""
        answer = self.console.input(f" ~ [bold yellow]Cleaning {what}[/]. Continue? \\[y/N] ")
        return answer.strip().lower().startswith("y")

    def clean_dir(self, path: Path) -> None:
        """Remove ``path`` if present, then recreate it empty.

        Raises:
            DirError: If the directory can't be removed or recreated.
        """
        if path.exists():
            remove_all_dirs(path)
        make_all_dirs(path)
        logger.info("🗑️ Cleaned %s", path)

    def clean(
        self, dots: bool = False, backups: bool = False, assume_yes: bool = False
    ) -> List[Path]:
        """Clean the selected directories.

        Args:
            dots: Clean the dots directory.
            backups: Clean the backups directory.
            assume_yes: Don't prompt for confirmation.

        Returns:
            List[Path]: Directories that were cleaned.
        """
        targets = []
        if dots:
            targets.append(("dots", self.config.dots_dir))
        if backups:
            targets.append(("backups", self.config.backup_dir))

        cleaned: List[Path] = []
        for what, path in targets:
            if not assume_yes and not self.confirm(what):
                self.console.print("Aborted.")
                continue
            self.clean_dir(path)
            cleaned.append(path)

        return cleaned
