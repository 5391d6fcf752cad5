"""Install functionality for nedots."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .config import Config
from .copy import copy
from .keys import SourceKeyIndex
from .paths import PathResolver, list_dir, mirror_path
from .repository import GitRepository

logger = logging.getLogger(__name__)

SUCCESS_MSG = "👍 Installed"


class InstallManager:
    """Copies tracked dots back into the home directory.

    Sources are used as declared, not resolved: an install target usually
    doesn't exist yet, so each one is simply placed under the home
    directory with ``prepend_home``.

    Attributes:
        config (Config): Configuration with resolved directories.
        resolver (PathResolver): Places sources under the home directory.
    """

    def __init__(self, config: Config, resolver: PathResolver):
        """Initialize install manager."""
        self.config = config
        self.resolver = resolver

    def install_source(self, source: Path) -> Optional[Path]:
        """Copy one source from the dots directory to its home destination.

        The tracked copy is looked up under the canonical home directory,
        the same place `sync --gather` puts it.

        Returns:
            Optional[Path]: The destination, or None if nothing is tracked
                for ``source``.
        """
        dst = self.resolver.prepend_home(source)
        src = mirror_path(self.config.dots_dir, self.resolver.under_real_home(dst))
        if not src.exists():
            logger.warning("Nothing to install for %s, `%s` is missing", dst, src)
            return None

        copy(src, dst)
        logger.info("%s %s", SUCCESS_MSG, dst)
        return dst

    def install_repo(self, repo: GitRepository) -> bool:
        """Clone a nested repository unless its working tree is already there.

        Returns:
            bool: Whether the repository was cloned.
        """
        if repo.exists():
            logger.info("%s is already cloned, skipping", repo.path)
            return False
        if repo.path.is_dir() and list_dir(repo.path):
            logger.info("%s already exists, skipping clone", repo.path)
            return False

        repo.clone()
        logger.info("%s %s", SUCCESS_MSG, repo.path)
        return True

    def install(self, key: Optional[str] = None, exact: bool = False) -> List[Path]:
        """Install one source by key, or every source and nested repository.

        Args:
            key: Any segment of a declared source, e.g. ``.bashrc``.
            exact: Match ``key`` against whole segments only.

        Returns:
            List[Path]: Destinations that were installed.

        Raises:
            SourceNotFoundError: If ``key`` matches no source.
            AmbiguousSourceKeyError: If ``exact`` and ``key`` matches several.
            CommandError: If a nested repository can't be cloned.
        """
        sources = self.config.sources
        if key is not None:
            sources = [SourceKeyIndex.build(sources, exact=exact).lookup(key)]

        installed: List[Path] = []
        for source in sources:
            dst = self.install_source(source)
            if dst is not None:
                installed.append(dst)

        if key is not None:
            return installed

        for git_repo in self.config.git_repos:
            repo = GitRepository(git_repo.remote, self.resolver.prepend_home(git_repo.path))
            if self.install_repo(repo):
                installed.append(repo.path)

        return installed
