"""Error types for nedots.

Every error raised on purpose by nedots derives from ``NedotsError`` so the
CLI can print a single structured line instead of a traceback.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence


class NedotsError(Exception):
    """Base class for nedots errors."""


class ResolutionError(NedotsError):
    """A path could not be made absolute and canonical."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        """Initialize error."""
        super().__init__(f"Failed to resolve `{path}` ({cause})")
        self.path = path
        self.cause = cause


class DirError(NedotsError):
    """A directory tree could not be created or removed."""

    action = "handle"

    def __init__(self, path: Path, cause: BaseException) -> None:
        """Initialize error."""
        super().__init__(f"Failed to {self.action} dir @ `{path}` ({cause})")
        self.path = path
        self.cause = cause


class MakeDirError(DirError):
    """Raised by ``make_all_dirs``."""

    action = "make"


class RemoveDirError(DirError):
    """Raised by ``remove_all_dirs``."""

    action = "remove"


class ReadDirError(DirError):
    """Raised by ``list_dir``."""

    action = "read"


class MetadataError(NedotsError):
    """Metadata for a path could not be read."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        """Initialize error."""
        super().__init__(f"No metadata ({path}: {cause})")
        self.path = path
        self.cause = cause


class CopyError(NedotsError):
    """A single file could not be copied."""

    def __init__(self, src: Path, dst: Path, cause: BaseException) -> None:
        """Initialize error."""
        super().__init__(f"Couldn't copy {src} -> {dst} ({cause})")
        self.src = src
        self.dst = dst
        self.cause = cause


class CommandError(NedotsError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], stderr: str = "", stdout: str = "") -> None:
        """Initialize error."""
        self.command = " ".join(command)
        super().__init__(f"`{self.command}` failed! Review the output & try again")
        self.stderr = stderr
        self.stdout = stdout


class ConfigError(NedotsError):
    """The configuration file is unreadable or malformed."""


class SourceNotFoundError(NedotsError):
    """No declared source matches a key."""

    def __init__(self, key: str) -> None:
        """Initialize error."""
        super().__init__(f"`{key}` not found")
        self.key = key


class AmbiguousSourceKeyError(NedotsError):
    """A key matches more than one declared source."""

    def __init__(self, key: str, matches: List[Path]) -> None:
        """Initialize error."""
        joined = ", ".join(str(m) for m in matches)
        super().__init__(f"`{key}` is ambiguous, it matches: {joined}")
        self.key = key
        self.matches = matches


class SyncError(NedotsError):
    """One or more repositories failed to sync."""

    def __init__(self, failed: List[Path], cause: Optional[BaseException] = None) -> None:
        """Initialize error."""
        joined = ", ".join(str(p) for p in failed)
        super().__init__(f"Failed to sync: {joined}")
        self.failed = failed
        self.cause = cause


class MigrationError(NedotsError):
    """A previous user's dots could not be migrated."""
