"""Backup functionality for nedots.

Every declared source is copied into ``backups/<unix timestamp>/``, keeping
its path relative to the home directory, so that a bad install or sync can
be rolled back by hand.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import Config
from .copy import copy
from .logging import TRACE
from .paths import PathResolver, make_all_dirs

logger = logging.getLogger(__name__)


def get_timestamp(now: Optional[datetime] = None) -> str:
    """Return the Unix timestamp, in seconds, used to name a snapshot."""
    now = now or datetime.now()
    return str(int(now.timestamp()))


class BackupManager:
    """Manages snapshots of declared sources.

    Attributes:
        config (Config): Resolved configuration.
        resolver (PathResolver): Used to place sources relative to home.
    """

    def __init__(self, config: Config, resolver: PathResolver):
        """Initialize the backup manager."""
        self.config = config
        self.resolver = resolver

    def backup_path(self, timestamp: Optional[str] = None) -> Path:
        """Get the snapshot directory for ``timestamp`` (default: now)."""
        return self.config.backup_dir / (timestamp or get_timestamp())

    def backup(self, timestamp: Optional[str] = None) -> Path:
        """Copy every source into a new snapshot directory.

        Args:
            timestamp: Snapshot name, defaults to the current Unix time.

        Returns:
            Path: The snapshot directory.

        Raises:
            MakeDirError: If the snapshot directory can't be created.
        """
        dst = self.backup_path(timestamp)
        logger.log(TRACE, "Backing up to `%s`", dst)

        make_all_dirs(dst)
        for source in self.config.sources:
            copy(source, dst / self.resolver.home_relative(source))

        logger.info("💽 All backed up! %s", dst)
        return dst
