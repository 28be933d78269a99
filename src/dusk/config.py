"""Persistent defaults for dusk, read from ~/.dusk/config.json."""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from dusk.models import ByteFormat

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(os.path.expanduser("~/.dusk"))
CONFIG_FILE = CONFIG_DIR / "config.json"

# Virtual filesystems that are never worth summing on Linux
DEFAULT_IGNORE_DIRS = ["/proc", "/dev", "/sys", "/run"] if sys.platform == "linux" else []


class Settings(BaseModel):
    """Defaults applied when the matching command-line flag is not given."""

    format: ByteFormat = Field(ByteFormat.METRIC, description="Byte display format")
    apparent_size: bool = Field(False, description="Measure apparent size")
    count_hard_links: bool = Field(False, description="Count each hard link separately")
    stay_on_filesystem: bool = Field(False, description="Do not cross filesystem boundaries")
    threads: int = Field(0, ge=0, description="Thread count hint, 0 means automatic")
    ignore_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_DIRS),
        description="Directories that are listed but not entered",
    )


def load_config(path: Optional[Path] = None) -> Settings:
    """
    Load settings from disk.

    A missing file yields the defaults. So does an unreadable or invalid one,
    after a warning is logged.

    Args:
        path: Config file to read, defaults to CONFIG_FILE
    """
    config_file = path or CONFIG_FILE
    if not config_file.exists():
        return Settings()

    try:
        with open(config_file) as f:
            return Settings.model_validate(json.load(f))
    except (json.JSONDecodeError, OSError, ValidationError) as e:
        logger.warning("Ignoring config file %s: %s", config_file, e)
        return Settings()
