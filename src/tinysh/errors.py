"""Application-level exception types for tinysh."""

from __future__ import annotations


class TinyshError(Exception):
    """Base exception for tinysh."""


class ConfigurationError(TinyshError):
    """Base exception for configuration and startup validation errors."""


class PathFileError(ConfigurationError):
    """Raised when the search-path file exists but cannot be read."""


class CommandError(TinyshError):
    """Base exception for failures that end the current command only."""


class SplitError(CommandError):
    """Raised when a vector is split at a position that holds no marker."""


class ChainError(CommandError):
    """Raised when a command line cannot be turned into a stage chain."""


class LaunchError(CommandError):
    """Raised when a child process or a pipe cannot be created."""


class RedirectionError(CommandError):
    """Raised when a redirection target cannot be opened."""
