from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import Field
from pydantic_settings import BaseSettings

from .errors import ConfigError

log = logging.getLogger(__name__)

APP_NAME = "track-work"
DEFAULT_FILENAME = "work.csv"


class Settings(BaseSettings):
    file: Optional[str] = Field(default=None, alias="TRACK_WORK_FILE")
    log_level: str = Field(default="WARNING", alias="TRACK_WORK_LOG_LEVEL")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def get_settings() -> Settings:
    """Load settings from the current environment (and ``.env``)."""
    return Settings()


def default_storage_path() -> Path:
    return Path(typer.get_app_dir(APP_NAME)) / DEFAULT_FILENAME


def resolve_storage_path(
    cli_path: Optional[str], settings: Optional[Settings] = None
) -> Path:
    """Pick the storage file: CLI flag, then TRACK_WORK_FILE, then the default.

    The parent directory is created so the first write can succeed. Raises
    ConfigError when the path is unusable.
    """
    if settings is None:
        settings = get_settings()
    if cli_path:
        raw, source = cli_path, "--file"
    elif settings.file:
        raw, source = settings.file, "TRACK_WORK_FILE"
    else:
        try:
            raw, source = str(default_storage_path()), "default"
        except (OSError, RuntimeError) as e:
            raise ConfigError(f"cannot determine a default storage file: {e}") from e

    path = Path(raw).expanduser()
    if path.is_dir():
        raise ConfigError(f"storage path is a directory: {path}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(
            f"cannot create directory for storage file {path}: {e.strerror or e}"
        ) from e
    log.debug("storage file %s (from %s)", path, source)
    return path
