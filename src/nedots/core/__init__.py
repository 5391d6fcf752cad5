"""Core functionality for nedots."""

from .backup import BackupManager
from .bootstrap import InitManager
from .clean import CleanManager
from .config import Config, GitRepo, load_config
from .environment import Environment
from .install import InstallManager
from .keys import SourceKeyIndex
from .paths import PathResolver
from .repository import GitRepository
from .sync import SyncManager

__all__ = [
    "BackupManager",
    "CleanManager",
    "Config",
    "Environment",
    "GitRepo",
    "GitRepository",
    "InitManager",
    "InstallManager",
    "PathResolver",
    "SourceKeyIndex",
    "SyncManager",
    "load_config",
]
