"""Migration of another user's dots.

The dots directory mirrors absolute paths, so dots gathered by ``alice`` live
under ``dots/home/alice``. When the same repository is initialized for
``bob``, that subtree has to move to ``dots/home/bob`` before install can
find it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import MigrationError
from .logging import TRACE
from .paths import make_all_dirs, mirror_path

logger = logging.getLogger(__name__)


def migrate_user(from_user: str, dots_dir: Path, home: Path) -> Path:
    """Move ``dots/home/<from_user>`` to the dots mirror of ``home``.

    Args:
        from_user: Name of the user the dots were gathered by.
        dots_dir: The dots directory.
        home: Home directory of the current user.

    Returns:
        Path: Where the dots now live.

    Raises:
        MigrationError: If there is nothing to migrate or the move fails.
    """
    logger.log(TRACE, "Migrating from `%s`", from_user)

    from_path = dots_dir / "home" / from_user
    to_path = mirror_path(dots_dir, home)
    if from_path == to_path:
        logger.debug("Dots already belong to %s", from_user)
        return to_path
    if not from_path.is_dir():
        raise MigrationError(f"No dots to migrate @ `{from_path}`")

    make_all_dirs(to_path.parent)
    logger.log(TRACE, "Renaming `%s` -> `%s`", from_path, to_path)
    try:
        from_path.rename(to_path)
    except OSError as e:
        raise MigrationError(f"Failed to move `{from_path}` -> `{to_path}` ({e})") from e

    logger.info("🚚 Migrated %s -> %s", from_path, to_path)
    return to_path
