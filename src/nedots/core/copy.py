"""Recursive copy of sources between home, dots and backup directories."""

from __future__ import annotations

import logging
import shutil
import stat
from pathlib import Path

from .errors import CopyError, MetadataError
from .logging import TRACE
from .paths import PathLike, get_metadata, list_dir, make_all_dirs

logger = logging.getLogger(__name__)


def is_directory(path: PathLike) -> bool:
    """Check whether ``path`` is a directory.

    Metadata is preferred since it reports why it failed; when it can't be
    read, ``Path.is_dir`` is good enough to keep going.
    """
    try:
        return stat.S_ISDIR(get_metadata(path).st_mode)
    except MetadataError as e:
        logger.log(TRACE, "%s, falling back to is_dir()", e)
        return Path(path).is_dir()


def copy_file(src: Path, dst: Path) -> None:
    """Copy the bytes of ``src`` over ``dst``.

    Raises:
        CopyError: If the file cannot be read or written.
    """
    try:
        shutil.copyfile(src, dst)
    except (OSError, shutil.Error) as e:
        raise CopyError(src, dst, e) from e


def copy(src: PathLike, dst: PathLike) -> None:
    """Copy a file or a whole directory tree from ``src`` to ``dst``.

    Directories are walked one level at a time, each child being copied to
    ``dst`` joined with the child's name, so the whole relative structure is
    rebuilt at the destination. Parent directories of each file are created
    on demand and existing files are overwritten.

    A file that cannot be copied is logged as a warning and skipped.
    Errors listing a directory or creating a parent directory are raised.

    Args:
        src: File or directory to copy.
        dst: Destination path, created if missing.

    Raises:
        ReadDirError: If a directory cannot be listed.
        MakeDirError: If a parent directory cannot be created.
    """
    pending = [(Path(src), Path(dst))]
    while pending:
        from_path, to_path = pending.pop()
        logger.log(TRACE, "Copying `%s` -> `%s`", from_path, to_path)

        if is_directory(from_path):
            children = sorted(list_dir(from_path), reverse=True)
            pending.extend((child, to_path / child.name) for child in children)
            continue

        if not to_path.parent.exists():
            make_all_dirs(to_path.parent)

        try:
            copy_file(from_path, to_path)
        except CopyError as e:
            logger.warning("Couldn't copy %s (%s)", from_path, e.cause)
