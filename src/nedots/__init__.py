"""Personal dotfiles manager backed by a Git repository."""

__version__ = "0.1.0"
