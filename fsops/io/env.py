"""
Helpers for locating and loading fsops environment files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

FSOPS_ENV_FILENAME = "fsops.env"


def default_env_path() -> Path:
    return Path.home() / FSOPS_ENV_FILENAME


def load_env(path: Optional[Path] = None) -> bool:
    """
    Load variables from an env file into the process environment.

    Variables already set in the environment win over the file.
    """
    path = path or default_env_path()
    if not Path(path).is_file():
        return False
    return load_dotenv(path, override=False)
