"""Settings for the file helpers and the command line.

Values come from EXPRTREE_* environment variables, optionally loaded from a
.env file first.
"""

import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

ENV_PREFIX = "EXPRTREE_"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    """Runtime settings. Result precision is fixed at two decimals and is not a setting."""
    model_config = ConfigDict(validate_default=True)

    tree_file: str = Field("savedTree.txt", description="File the indented tree dump is written to")
    file_suffix: str = Field(".txt", description="Suffix appended to file names that lack it")
    log_level: str = Field("WARNING", description="Root logging level for the command line")
    history_file: str = Field("~/.exprtree_history", description="Prompt history for the interactive menu")

    @field_validator('tree_file')
    @classmethod
    def tree_file_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Tree file cannot be empty')
        return v.strip()

    @field_validator('file_suffix')
    @classmethod
    def suffix_must_start_with_dot(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith('.') or len(v) < 2:
            raise ValueError('File suffix must start with "." and name an extension')
        return v

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f'Unknown log level: {v}')
        return level

    @field_validator('history_file')
    @classmethod
    def expand_history_file(cls, v: str) -> str:
        return os.path.expanduser(v.strip())

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    def with_suffix(self, filename: str) -> str:
        """Append file_suffix unless the name already ends with it (case-insensitive)."""
        if filename.lower().endswith(self.file_suffix.lower()):
            return filename
        return filename + self.file_suffix


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from the environment.

    Args:
        env_file: Optional .env file to load before reading the environment

    Raises:
        ConfigError: If env_file does not exist or any value fails validation
    """
    if env_file is not None and not os.path.isfile(env_file):
        raise ConfigError(f"Env file not found: {env_file}")
    load_dotenv(env_file)
    values: Dict[str, str] = {}
    for name in Settings.model_fields:
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = raw
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
