"""Configuration management for nedots.

The configuration file is YAML:

```yaml
remote: git@git.sr.ht:~nedia/nedots
sources:
  - .config/nedots
  - .bashrc
git_repos:
  - remote: git@git.sr.ht:~nedia/config.nvim
    path: .config/nvim
```

``root``, ``dots_dir`` and ``backup_dir`` are never read from or written to
the file, they are derived from the environment when the file is loaded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .environment import Environment
from .errors import ConfigError, ResolutionError
from .logging import TRACE
from .paths import PathResolver

logger = logging.getLogger(__name__)

DEFAULT_DOTS_DIR = "dots"
DEFAULT_BACKUP_DIR = "backups"
DEFAULT_CONFIG = "nedots/nedots.yml"


@dataclass(frozen=True)
class GitRepo:
    """A nested repository with its own remote."""

    remote: str
    path: Path

    @classmethod
    def from_dict(cls, data: Any) -> "GitRepo":
        """Build a repo entry from its YAML mapping."""
        if not isinstance(data, dict):
            raise ConfigError(f"git repo entry must be a mapping, got {data!r}")
        remote = data.get("remote")
        path = data.get("path")
        if not isinstance(remote, str) or not remote:
            raise ConfigError(f"git repo entry {data!r} must have a remote")
        if not isinstance(path, str) or not path:
            raise ConfigError(f"git repo entry {data!r} must have a path")
        return cls(remote=remote, path=Path(path))

    def to_dict(self) -> Dict[str, str]:
        """Return the YAML mapping for this entry."""
        return {"remote": self.remote, "path": str(self.path)}


@dataclass(frozen=True)
class Config:
    """Sources, nested repositories and directories nedots works with."""

    remote: str = ""
    sources: List[Path] = field(default_factory=list)
    git_repos: List[GitRepo] = field(default_factory=list)
    root: Path = Path()

    @property
    def dots_dir(self) -> Path:
        """Tracked copies of every source, mirrored by absolute path."""
        return self.root / DEFAULT_DOTS_DIR

    @property
    def backup_dir(self) -> Path:
        """Timestamped snapshots taken by ``nedots backup``."""
        return self.root / DEFAULT_BACKUP_DIR

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], root: Path = Path()) -> "Config":
        """Build a configuration from parsed YAML.

        Missing keys default to empty values. ``gitRepos`` is accepted as an
        alias of ``git_repos``.

        Raises:
            ConfigError: If a key has the wrong type.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        remote = data.get("remote", "")
        if not isinstance(remote, str):
            raise ConfigError("remote must be a string")

        sources = data.get("sources") or []
        if not isinstance(sources, list):
            raise ConfigError("sources must be a list")
        for source in sources:
            if not isinstance(source, str):
                raise ConfigError(f"source {source!r} must be a string")

        git_repos = data.get("git_repos", data.get("gitRepos")) or []
        if not isinstance(git_repos, list):
            raise ConfigError("git_repos must be a list")

        return cls(
            remote=remote,
            sources=[Path(s) for s in sources],
            git_repos=[GitRepo.from_dict(r) for r in git_repos],
            root=Path(root),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the YAML document for this configuration."""
        return {
            "remote": self.remote,
            "sources": [str(s) for s in self.sources],
            "git_repos": [r.to_dict() for r in self.git_repos],
        }

    def to_yaml(self) -> str:
        """Serialize to YAML."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    def resolve_dirs(self, resolver: PathResolver) -> "Config":
        """Resolve the root directory.

        A directory that can't be resolved is logged and kept as is, it may
        simply not have been created yet.
        """
        try:
            root = resolver.resolve(self.root)
        except ResolutionError as e:
            logger.error("❌ %s", e)
            return self
        return replace(self, root=root)

    def resolve_sources(self, resolver: PathResolver) -> "Config":
        """Resolve every source and nested repository path.

        Entries that can't be resolved are logged and dropped.
        """
        sources: List[Path] = []
        for source in self.sources:
            try:
                sources.append(resolver.resolve(source))
            except ResolutionError as e:
                logger.error("❌ %s", e)

        git_repos: List[GitRepo] = []
        for repo in self.git_repos:
            try:
                git_repos.append(replace(repo, path=resolver.resolve(repo.path)))
            except ResolutionError as e:
                logger.error("❌ %s", e)

        return replace(self, sources=sources, git_repos=git_repos)

    def resolve_paths(self, resolver: PathResolver) -> "Config":
        """Resolve directories, sources and nested repositories."""
        return self.resolve_dirs(resolver).resolve_sources(resolver)


def sample_config() -> Config:
    """Return the sample configuration written by ``nedots init``."""
    return Config(
        remote="git@git.sr.ht:~nedia/nedots",
        sources=[Path(".config/nedots")],
        git_repos=[GitRepo(remote="git@git.sr.ht:~nedia/config.nvim", path=Path(".config/nvim"))],
    )


def read_config(path: Path, resolver: PathResolver) -> Config:
    """Read and parse a configuration file.

    Raises:
        ResolutionError: If the file can't be found.
        ConfigError: If the file can't be read or parsed.
    """
    path = resolver.resolve(path)

    logger.log(TRACE, "Reading `%s`...", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read `{path}` ({e})") from e

    logger.log(TRACE, "Deserializing...")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to deserialize `{path}` ({e})") from e

    return Config.from_dict(data)


def config_path(environment: Environment, config_name: str = DEFAULT_CONFIG) -> Path:
    """Locate the configuration file.

    ``config_name`` is used as given when it exists, otherwise it is looked
    up below the user's config directory.
    """
    path = Path(config_name).expanduser()
    if path.exists():
        return path
    return environment.config_dir / config_name


def load_config(
    environment: Environment,
    config_name: str = DEFAULT_CONFIG,
    resolve_sources: bool = True,
) -> Config:
    """Load the configuration and resolve its paths, once, before a command runs.

    Args:
        environment: Supplies the home, config and data directories.
        config_name: Config file, as given on the command line.
        resolve_sources: Resolve sources & nested repositories too. Install
            skips this since its destinations don't exist yet.

    Returns:
        Config: Configuration rooted at ``environment.root_dir``.
    """
    resolver = PathResolver(environment)
    config = read_config(config_path(environment, config_name), resolver)
    config = replace(config, root=environment.root_dir)
    logger.debug("Raw %s", config)

    if resolve_sources:
        config = config.resolve_paths(resolver)
    else:
        config = config.resolve_dirs(resolver)

    logger.debug("Resolved %s", config)
    return config
