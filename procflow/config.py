"""Runtime settings, read from the environment and an optional ``.env`` file.

    PROCFLOW_LOG_LEVEL     logging level name (default WARNING)
    PROCFLOW_TEMPLATE_DIR  directory holding render templates
                           (default: the templates shipped with the package)
    PROCFLOW_OUTPUT        default CLI output format, "text" or "json"
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .result import Err, Ok, Result

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.WARNING
    template_dir: Path = DEFAULT_TEMPLATE_DIR
    output: str = "text"

    @classmethod
    def from_env(cls) -> Result["Settings", Exception]:
        """Load settings, reporting the first invalid value as an ``Err``."""
        load_dotenv()

        level_name = os.getenv("PROCFLOW_LOG_LEVEL", "WARNING").strip().upper()
        level = logging.getLevelNamesMapping().get(level_name)
        if level is None:
            return Err(ValueError(f"PROCFLOW_LOG_LEVEL is not a logging level: {level_name!r}"))

        match os.getenv("PROCFLOW_TEMPLATE_DIR"):
            case str(raw) if raw.strip():
                template_dir = Path(raw.strip())
                if not template_dir.is_dir():
                    return Err(
                        NotADirectoryError(f"PROCFLOW_TEMPLATE_DIR does not exist: {template_dir}")
                    )
            case _:
                template_dir = DEFAULT_TEMPLATE_DIR

        output = os.getenv("PROCFLOW_OUTPUT", "text").strip().lower()
        if output not in OUTPUT_FORMATS:
            return Err(ValueError(f"PROCFLOW_OUTPUT must be one of {OUTPUT_FORMATS}, got {output!r}"))

        return Ok(cls(log_level=level, template_dir=template_dir, output=output))
