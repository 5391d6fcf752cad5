"""Process environment for nedots.

The home directory and the base config/data directories are looked up once,
when the CLI starts, and passed around as an ``Environment`` value. Tests
build their own ``Environment`` pointing at temporary directories.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "nedots"
CONFIG_FILENAME = "nedots.yml"


@dataclass(frozen=True)
class Environment:
    """Home, config and data directories used by every command."""

    home: Path
    config_dir: Path
    data_dir: Path

    @classmethod
    def from_system(cls) -> "Environment":
        """Build the environment from OS-standard base directories."""
        return cls(
            home=Path.home().resolve(),
            config_dir=Path(user_config_dir()),
            data_dir=Path(user_data_dir()),
        )

    @property
    def root_dir(self) -> Path:
        """Managed repository holding the dots & backups directories."""
        return self.data_dir / APP_NAME

    @property
    def config_home(self) -> Path:
        """Directory holding the nedots configuration file."""
        return self.config_dir / APP_NAME

    @property
    def default_config_file(self) -> Path:
        """Path of the configuration file written by ``nedots init``."""
        return self.config_home / CONFIG_FILENAME
