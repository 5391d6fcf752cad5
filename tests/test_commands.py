"""Test CLI commands."""

from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

from nedots.cli import cli
from nedots.core.backup import BackupManager
from nedots.core.environment import Environment
from nedots.core.paths import mirror_path

pytestmark = pytest.mark.usefixtures("restore_logging")


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner: CliRunner, environment: Environment) -> Callable[..., object]:
    """Return a helper invoking the CLI inside the test environment."""

    def _invoke(*args: str, **kwargs: object):
        return cli_runner.invoke(cli, list(args), obj={"environment": environment}, **kwargs)

    return _invoke


def test_help(invoke: Callable[..., object]) -> None:
    """Test help lists the main commands."""
    result = invoke("--help")
    assert result.exit_code == 0
    for command in ["init", "install", "backup", "sync", "clean"]:
        assert command in result.output


def test_backup(
    invoke: Callable[..., object],
    write_config: Callable[..., Path],
    home: Path,
    root_dir: Path,
) -> None:
    """Test backup command."""
    (home / ".bashrc").write_text("X")
    write_config(sources=[".bashrc"])

    result = invoke("backup")

    assert result.exit_code == 0, result.output
    snapshots = list((root_dir / "backups").iterdir())
    assert len(snapshots) == 1
    assert snapshots[0].name.isdigit()
    assert (snapshots[0] / ".bashrc").read_text() == "X"


def test_backup_missing_config(invoke: Callable[..., object], root_dir: Path) -> None:
    """Test a missing config file fails with a single error line."""
    result = invoke("backup")

    assert result.exit_code == 1
    assert "❌" in result.output
    assert list((root_dir / "backups").iterdir()) == []


def test_backup_custom_config(
    invoke: Callable[..., object], tmp_path: Path, home: Path, root_dir: Path
) -> None:
    """Test --config accepts a file outside the config directory."""
    (home / ".profile").write_text("X")
    config_file = tmp_path / "custom.yml"
    config_file.write_text("sources:\n  - .profile\n")

    result = invoke("--config", str(config_file), "backup")

    assert result.exit_code == 0, result.output
    (snapshot,) = list((root_dir / "backups").iterdir())
    assert (snapshot / ".profile").exists()


def test_backup_unreadable_dir(
    invoke: Callable[..., object],
    write_config: Callable[..., Path],
    home: Path,
    root_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test a directory that can't be listed fails with a single error line."""
    bspwm = home / ".config" / "bspwm"
    bspwm.mkdir(parents=True)
    (bspwm / "bspwmrc").write_text("X")
    write_config(sources=[".config/bspwm"])
    iterdir = Path.iterdir

    def locked_iterdir(self: Path):
        if self.name == "bspwm":
            raise PermissionError(13, "Permission denied", str(self))
        return iterdir(self)

    monkeypatch.setattr(Path, "iterdir", locked_iterdir)

    result = invoke("backup")

    assert result.exit_code == 1
    assert not isinstance(result.exception, PermissionError)
    assert "❌ Failed to read dir" in result.output


def test_os_error_is_reported(
    invoke: Callable[..., object],
    write_config: Callable[..., Path],
    root_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test an unexpected OS error fails with a single error line."""
    write_config()

    def backup(self: BackupManager, timestamp: object = None) -> Path:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(BackupManager, "backup", backup)

    result = invoke("backup")

    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)
    assert "❌" in result.output
    assert "No space left on device" in result.output


def test_install(
    invoke: Callable[..., object],
    write_config: Callable[..., Path],
    home: Path,
    root_dir: Path,
) -> None:
    """Test install command copies tracked files into home."""
    dots_home = mirror_path(root_dir / "dots", home)
    (dots_home / ".config" / "bspwm").mkdir(parents=True)
    (dots_home / ".config" / "bspwm" / "bspwmrc").write_text("bspc monitor -d I II")
    (dots_home / ".profile").write_text("export EDITOR=nvim")
    write_config(sources=[".config/bspwm", ".profile"])

    result = invoke("install", "bspwm")

    assert result.exit_code == 0, result.output
    assert (home / ".config" / "bspwm" / "bspwmrc").exists()
    assert not (home / ".profile").exists()

    result = invoke("install")

    assert result.exit_code == 0, result.output
    assert (home / ".profile").read_text() == "export EDITOR=nvim"


def test_install_unknown_key(
    invoke: Callable[..., object], write_config: Callable[..., Path], root_dir: Path
) -> None:
    """Test an unknown key fails."""
    write_config(sources=[".profile"])

    result = invoke("install", "zshrc")

    assert result.exit_code == 1
    assert "`zshrc` not found" in result.output


def test_clean_confirmed(
    invoke: Callable[..., object], write_config: Callable[..., Path], root_dir: Path
) -> None:
    """Test clean asks before removing backups."""
    (root_dir / "backups" / "1700000000").mkdir()
    write_config()

    result = invoke("clean", "--backups", input="y\n")

    assert result.exit_code == 0, result.output
    assert "Continue?" in result.output
    assert list((root_dir / "backups").iterdir()) == []


def test_clean_declined(
    invoke: Callable[..., object], write_config: Callable[..., Path], root_dir: Path
) -> None:
    """Test declining the prompt keeps everything."""
    (root_dir / "backups" / "1700000000").mkdir()
    write_config()

    result = invoke("clean", "-b", input="n\n")

    assert result.exit_code == 0, result.output
    assert "Aborted." in result.output
    assert (root_dir / "backups" / "1700000000").is_dir()


def test_clean_assumeyes(
    invoke: Callable[..., object], write_config: Callable[..., Path], root_dir: Path
) -> None:
    """Test -y skips the prompt."""
    (root_dir / "dots" / "home").mkdir()
    write_config()

    result = invoke("clean", "-d", "-y")

    assert result.exit_code == 0, result.output
    assert "Continue?" not in result.output
    assert list((root_dir / "dots").iterdir()) == []


def test_log_file(
    invoke: Callable[..., object],
    write_config: Callable[..., Path],
    tmp_path: Path,
    root_dir: Path,
) -> None:
    """Test --log-file captures trace output."""
    write_config()
    log_file = tmp_path / "logs" / "nedots.log"

    result = invoke("-q", "--log-file", str(log_file), "backup")

    assert result.exit_code == 0, result.output
    assert "TRACE" in log_file.read_text()


@pytest.mark.parametrize("shell", ["bash", "zsh", "fish"])
def test_completions(invoke: Callable[..., object], shell: str) -> None:
    """Test completion scripts are generated."""
    result = invoke("completions", shell)

    assert result.exit_code == 0
    assert "_NEDOTS_COMPLETE" in result.output


def test_completions_unknown_shell(invoke: Callable[..., object]) -> None:
    """Test an unsupported shell is rejected."""
    result = invoke("completions", "tcsh")

    assert result.exit_code == 2
