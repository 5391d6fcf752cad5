"""Test configuration."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterator

import pytest
import yaml

from nedots.core.environment import Environment
from nedots.core.paths import PathResolver

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(*args: str, cwd: Path) -> str:
    """Run git for test setup and return its stdout."""
    result = subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    )
    return result.stdout.strip()


@pytest.fixture(autouse=True)
def git_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give git an identity so commits work on any machine."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo what ``setup_logging`` does to the root logger."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    excepthook = sys.excepthook
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    sys.excepthook = excepthook


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test from an empty working directory."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Create a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home.resolve()


@pytest.fixture
def environment(tmp_path: Path, home: Path, workdir: Path) -> Environment:
    """Create an environment rooted in temporary directories."""
    return Environment(
        home=home,
        config_dir=(tmp_path / "config").resolve(),
        data_dir=(tmp_path / "data").resolve(),
    )


@pytest.fixture
def resolver(environment: Environment) -> PathResolver:
    """Create a resolver for the temporary home directory."""
    return PathResolver(environment)


@pytest.fixture
def root_dir(environment: Environment) -> Path:
    """Create the managed root directory with empty dots & backups."""
    root = environment.root_dir
    (root / "dots").mkdir(parents=True)
    (root / "backups").mkdir()
    return root


@pytest.fixture
def write_config(environment: Environment) -> Callable[..., Path]:
    """Return a helper writing nedots.yml to the default location."""

    def _write(**data: Any) -> Path:
        config_file = environment.default_config_file
        config_file.parent.mkdir(parents=True, exist_ok=True)
        document: Dict[str, Any] = {"remote": "", "sources": [], "git_repos": []}
        document.update(data)
        config_file.write_text(yaml.safe_dump(document))
        return config_file

    return _write


@pytest.fixture
def make_remote(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper creating a bare repository with one commit on main."""

    def _make(name: str, files: Dict[str, str]) -> Path:
        remote = tmp_path / "remotes" / f"{name}.git"
        remote.mkdir(parents=True)
        git("init", "--bare", cwd=remote)
        git("symbolic-ref", "HEAD", "refs/heads/main", cwd=remote)

        seed = tmp_path / "seeds" / name
        seed.parent.mkdir(parents=True, exist_ok=True)
        git("clone", str(remote), str(seed), cwd=tmp_path)
        git("checkout", "-b", "main", cwd=seed)
        for rel_path, content in files.items():
            path = seed / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        git("add", ".", cwd=seed)
        git("commit", "-m", "Initial commit", cwd=seed)
        git("push", "-u", "origin", "main", cwd=seed)
        return remote

    return _make
