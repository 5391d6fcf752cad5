"""Path resolution and directory helpers.

Sources are declared relative to the home directory (``.bashrc``,
``.config/bspwm``) or as absolute paths. ``PathResolver`` turns them into
absolute, canonical paths; the rest of this module creates, removes and
re-roots directory trees.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import List, Union

from .environment import Environment
from .errors import (
    MakeDirError,
    MetadataError,
    ReadDirError,
    RemoveDirError,
    ResolutionError,
)
from .logging import TRACE

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PathResolver:
    """Resolve declared paths against the user's home directory.

    Attributes:
        environment (Environment): Supplies the home directory.
    """

    def __init__(self, environment: Environment) -> None:
        """Initialize resolver."""
        self.environment = environment

    @property
    def home(self) -> Path:
        """Home directory every relative path falls back to."""
        return self.environment.home

    def resolve(self, path: PathLike) -> Path:
        """Resolve ``path`` into an absolute, canonical path.

        If the path exists as given it is kept, otherwise the home directory
        is prepended. The result is then canonicalized (symlinks, ``.`` and
        ``..`` resolved), which requires it to exist.

        Args:
            path: Path to resolve, relative or absolute.

        Returns:
            Path: Absolute, canonical path.

        Raises:
            ResolutionError: If the path exists neither as given nor under
                the home directory, or cannot be accessed.
        """
        candidate = Path(path)
        logger.log(TRACE, "Resolving `%s`...", candidate)

        if not candidate.exists():
            candidate = self.prepend_home(candidate)

        try:
            resolved = candidate.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise ResolutionError(candidate, e) from e

        logger.log(TRACE, "Resolved `%s`", resolved)
        return resolved

    def prepend_home(self, path: PathLike) -> Path:
        """Join the home directory and ``path`` without touching the disk.

        Absolute paths are returned unchanged.
        """
        joined = self.home / path
        logger.log(TRACE, "+$HOME `%s` -> `%s`", path, joined)
        return joined

    def home_relative(self, path: PathLike) -> Path:
        """Return ``path`` relative to home, or anchor-stripped when outside it."""
        path = Path(path)
        for home in (self.home, self.home.resolve()):
            try:
                return path.relative_to(home)
            except ValueError:
                continue
        return strip_anchor(path)

    def under_real_home(self, path: PathLike) -> Path:
        """Swap the home prefix of ``path`` for the canonical home directory.

        Only the home part is canonicalized, the rest of ``path`` doesn't
        have to exist. Paths outside home are returned unchanged. This keeps
        home-relative paths in line with resolved ones when home itself is
        reached through a symlink, e.g. `/home` -> `/var/home`.
        """
        path = Path(path)
        try:
            return self.home.resolve() / path.relative_to(self.home)
        except ValueError:
            return path


def strip_anchor(path: PathLike) -> Path:
    """Drop the drive/root of an absolute path, leaving a relative one."""
    path = Path(path)
    if path.anchor:
        return Path(*path.parts[1:])
    return path


def mirror_path(root: PathLike, path: PathLike) -> Path:
    """Re-root ``path`` under ``root``.

    ``mirror_path("/data/dots", "/home/user/.bashrc")`` is
    ``/data/dots/home/user/.bashrc``. Relative paths are simply joined.
    """
    mirrored = Path(root) / strip_anchor(path)
    logger.log(TRACE, "Joining `%s` -> `%s`", root, path)
    return mirrored


def make_all_dirs(path: PathLike) -> None:
    """Create ``path`` and every missing parent.

    Succeeds without doing anything when the directory already exists.

    Raises:
        MakeDirError: If a component cannot be created, or exists and is
            not a directory.
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MakeDirError(path, e) from e
    logger.debug("++ %s", path)


def remove_all_dirs(path: PathLike) -> None:
    """Delete the directory ``path`` and everything below it.

    Raises:
        RemoveDirError: If the tree cannot be removed, including when it
            does not exist.
    """
    path = Path(path)
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise RemoveDirError(path, e) from e
    logger.debug("-- %s", path)


def list_dir(path: PathLike) -> List[Path]:
    """Return the entries of the directory ``path``.

    Raises:
        ReadDirError: If the directory cannot be listed.
    """
    path = Path(path)
    try:
        return list(path.iterdir())
    except OSError as e:
        raise ReadDirError(path, e) from e


def get_metadata(path: PathLike) -> os.stat_result:
    """Return the ``stat`` result of ``path``.

    Raises:
        MetadataError: If the metadata cannot be read.
    """
    try:
        return os.stat(path)
    except OSError as e:
        raise MetadataError(Path(path), e) from e
