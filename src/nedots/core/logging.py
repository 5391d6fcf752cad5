"""Logging configuration for nedots.

This module provides centralized logging configuration for the nedots
package: a rich console handler whose level follows the ``-v``/``-q``
flags, an optional file handler, and an extra ``TRACE`` level below
``DEBUG`` for the chattiest diagnostics (resolved paths, git command lines,
git stdout).

Example:
    ```python
    from nedots.core.logging import TRACE, setup_logging

    # INFO and above on the console
    setup_logging()

    # -vv: everything, including TRACE
    setup_logging(verbosity=2, log_file="~/logs/nedots.log")

    import logging
    logger = logging.getLogger(__name__)

    logger.log(TRACE, "Resolving `%s`...", ".bashrc")
    logger.info("👍 Installed %s", "/home/user/.bashrc")
    ```
"""

import logging
import sys
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from rich.console import Console
from rich.logging import RichHandler

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Create console for rich output
console = Console()


def level_for(verbosity: int = 0, quiet: bool = False) -> int:
    """Map the CLI verbosity flags to a logging level.

    Args:
        verbosity: Number of ``-v`` flags given.
        quiet: Whether ``-q`` was given. Wins over ``verbosity``.

    Returns:
        ERROR when quiet, INFO by default, DEBUG for ``-v`` and TRACE for
        ``-vv`` or more.
    """
    if quiet:
        return logging.ERROR
    if verbosity >= 2:
        return TRACE
    if verbosity == 1:
        return logging.DEBUG
    return logging.INFO


def console_enabled_for(level: int) -> bool:
    """Check whether records of ``level`` reach the console.

    The root logger may be lowered to TRACE for a log file while the console
    stays at INFO, so the console handler's own level is what counts.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, RichHandler):
            return root_logger.isEnabledFor(level) and level >= handler.level
    return root_logger.isEnabledFor(level)


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    log_file: Optional[str] = None,
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
) -> None:
    """Set up logging configuration.

    Console output uses rich formatting. User-facing runs hide the time and
    logger path, the same way a plain CLI would print; with ``-v`` or more
    the path is shown to help debugging.

    Args:
        verbosity: Number of ``-v`` flags (default: 0).
        quiet: Only show errors (default: False).
        log_file: Optional path to log file. If provided, everything down to
                 TRACE is written there as well. ``~`` is expanded.
        log_format: Format string for the file handler.
    """
    level = level_for(verbosity, quiet)
    debug = level <= logging.DEBUG

    # Set root logger level
    root_logger = logging.getLogger()
    root_logger.setLevel(TRACE if log_file else level)

    # Remove existing handlers
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=console,
        show_time=debug,
        show_level=debug,
        show_path=debug,
        enable_link_path=debug,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    # Add file handler if log file specified
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(TRACE)
        file_handler.setFormatter(logging.Formatter(log_format))
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized (level=%s)", logging.getLevelName(level))
    if log_file:
        logger.debug("Log file: %s", log_file)

    # Log uncaught exceptions
    def handle_exception(
        exc_type: Type[BaseException],
        exc_value: BaseException,
        exc_traceback: Optional[TracebackType],
    ) -> None:
        """Handle uncaught exceptions by logging them."""
        if issubclass(exc_type, KeyboardInterrupt):
            # Don't log keyboard interrupt
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback),
        )

    sys.excepthook = handle_exception
