import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .constants import CANONICAL_WIDTH, CANONICAL_HEIGHT
from .errors import ConfigError


TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ScannerConfig:
    """
    Deployment settings of the scanner.

    Calibrated algorithm constants live in ``common.constants``; this only
    holds what may differ between installations.
    """
    page_width: int = CANONICAL_WIDTH
    page_height: int = CANONICAL_HEIGHT
    output_dir: str = "temp"
    debug: bool = False

    def __post_init__(self):
        if self.page_width <= 0 or self.page_height <= 0:
            raise ConfigError(f"Page size must be positive, got {self.page_width}x{self.page_height}")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ScannerConfig":
        """
        Load settings from environment variables (and a .env file if present).

        Variables:
            SCANNER_PAGE_WIDTH, SCANNER_PAGE_HEIGHT: canonical page size, both or neither
            SCANNER_OUTPUT_DIR: where the CLI writes results
            SCANNER_DEBUG: print debug output
        """
        load_dotenv(env_file)

        width = os.getenv("SCANNER_PAGE_WIDTH")
        height = os.getenv("SCANNER_PAGE_HEIGHT")
        if (width is None) != (height is None):
            raise ConfigError("SCANNER_PAGE_WIDTH and SCANNER_PAGE_HEIGHT must be set together")

        try:
            page_width = int(width) if width is not None else CANONICAL_WIDTH
            page_height = int(height) if height is not None else CANONICAL_HEIGHT
        except ValueError as e:
            raise ConfigError(f"Invalid page size: {e}") from e

        return cls(
            page_width=page_width,
            page_height=page_height,
            output_dir=os.getenv("SCANNER_OUTPUT_DIR", "temp"),
            debug=os.getenv("SCANNER_DEBUG", "").strip().lower() in TRUE_VALUES,
        )
