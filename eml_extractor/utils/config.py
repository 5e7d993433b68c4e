"""
Configuration Management Module
Handles loading and validation of environment variables and settings
"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv


LOG_FORMATS = ("text", "json")


@dataclass
class SystemConfig:
    """Configuration for logging and console output"""
    log_level: str
    log_file: Optional[str]
    log_format: str
    no_color: bool


@dataclass
class ExtractionConfig:
    """Defaults for extraction runs (overridable on the command line)"""
    output_dir: Optional[str]
    cleanup: bool


class Config:
    """Main configuration class"""

    def __init__(self, env_file: str = ".env"):
        """
        Initialize configuration from environment file

        A missing env file is not an error; the process environment and
        the defaults below still apply.

        Args:
            env_file: Path to environment file (default: .env)
        """
        load_dotenv(env_file)

        self.system = self._load_system_config()
        self.extraction = self._load_extraction_config()

    def _load_system_config(self) -> SystemConfig:
        """Load system configuration"""
        return SystemConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            log_format=os.getenv("LOG_FORMAT", "text").strip().lower(),
            # https://no-color.org: any non-empty value disables colors
            no_color=bool(os.getenv("NO_COLOR")),
        )

    def _load_extraction_config(self) -> ExtractionConfig:
        """Load extraction defaults"""
        return ExtractionConfig(
            output_dir=os.getenv("EML_OUTPUT_DIR") or None,
            cleanup=self._get_bool("EML_CLEANUP", False),
        )

    @staticmethod
    def _get_bool(key: str, default: bool = False) -> bool:
        """Convert environment variable to boolean"""
        value = os.getenv(key, str(default)).lower()
        return value in ('true', '1', 'yes', 'on')

    def validate(self) -> bool:
        """
        Validate configuration

        Returns:
            True if configuration is valid

        Raises:
            ValueError: If configuration is invalid
        """
        if self.system.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Unknown LOG_FORMAT '{self.system.log_format}'; "
                f"expected one of: {', '.join(LOG_FORMATS)}"
            )
        return True
