"""Runtime settings read from the environment.

Values come from ``NB_TRAINER_*`` environment variables, which may also be
placed in a ``.env`` file in the working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "NB_TRAINER_"


@dataclass(frozen=True)
class Settings:
    """Defaults for the command-line interface."""

    model_dir: Path = Path("Model_Dir")
    smoothing: str = "laplace"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from the environment.

        Args:
            dotenv: Whether to load a ``.env`` file first. Variables already
                set in the environment take precedence over the file.
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        defaults = cls()
        return cls(
            model_dir=Path(os.getenv(f"{ENV_PREFIX}MODEL_DIR", str(defaults.model_dir))),
            smoothing=os.getenv(f"{ENV_PREFIX}SMOOTHING", defaults.smoothing).lower(),
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
        )
