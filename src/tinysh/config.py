"""Configuration management for tinysh."""

from pathlib import Path
from typing import Any, Optional

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import PathFileError
from .logging_utils import configure_logging


class Settings(BaseSettings):
    """Application settings."""

    # Shell Configuration
    verbose: bool = Field(default=False, description="Start the shell in verbose mode")
    prompt: str = Field(default="tinysh> ", description="Prompt shown before each command line")
    path_file: Optional[Path] = Field(None, description="File listing one executable search prefix per line")

    # Execution Configuration
    max_stages: int = Field(default=2, ge=1, description="Maximum number of commands in one pipeline")
    pipe_buffer_size: int = Field(
        default=1 << 20, ge=0, description="Requested pipe capacity in bytes, 0 keeps the system default"
    )

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Log level")

    model_config = SettingsConfigDict(
        env_prefix="TINYSH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )


def load_search_path(path_file: Optional[Path]) -> tuple[str, ...]:
    """Read executable search prefixes from a path file.

    Each non-blank line is one prefix, kept in file order. Prefixes are used
    verbatim, so a directory needs its trailing slash.

    Args:
        path_file: The file to read, or None for the environment search

    Returns:
        The prefixes, or an empty tuple when the environment search applies

    Raises:
        PathFileError: If the file exists but cannot be read
    """
    if path_file is None:
        return ()
    try:
        with open(path_file, encoding="utf-8") as file:
            lines = file.read().splitlines()
    except FileNotFoundError:
        logger.info("config.path_file missing path={}", path_file)
        return ()
    except OSError as exc:
        raise PathFileError(f"Unable to read path file {path_file}: {exc.strerror}") from exc
    return tuple(line.strip() for line in lines if line.strip())


def get_settings(**overrides: Any) -> Settings:
    """Get application settings.

    Args:
        overrides: Field values that take precedence over the environment;
            None values are ignored

    Returns:
        Settings instance
    """
    settings = Settings(**{key: value for key, value in overrides.items() if value is not None})

    configure_logging(profile="shell", level=settings.log_level)

    return settings
