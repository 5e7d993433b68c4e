#!/usr/bin/env python3
"""
EML Extractor
Converts one .eml message into a folder holding email.md and its attachments
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from eml_extractor.app_runner import AppRunner
from eml_extractor.utils.config import SystemConfig
from eml_extractor.utils.logging_utils import ColoredFormatter
from eml_extractor.utils.structured_logging import JSONFormatter


def setup_logging(
    system: SystemConfig,
    level: Optional[str] = None,
    json_logs: bool = False,
) -> None:
    """
    Setup logging configuration

    Console logs go to stderr, colored or as JSON lines. LOG_FILE adds a
    plain-text file handler.

    Args:
        system: Logging settings loaded from the environment
        level: Log level override from the command line
        json_logs: Force JSON output regardless of LOG_FORMAT
    """
    # Resolve log level with safe fallback
    level_name = str(level or system.log_level).upper()
    resolved_level = logging._nameToLevel.get(level_name, logging.INFO)

    console = logging.StreamHandler(sys.stderr)
    if json_logs or system.log_format == "json":
        console.setFormatter(JSONFormatter())
    else:
        console.setFormatter(ColoredFormatter())
    handlers = [console]

    if system.log_file:
        log_path = Path(system.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(ColoredFormatter.DEFAULT_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=resolved_level, handlers=handlers, force=True)

    if level_name not in logging._nameToLevel:
        logging.getLogger("EmlExtractor").warning(
            "Invalid log level '%s'; defaulting to INFO", level_name
        )


def main(argv=None) -> int:
    """Main entry point"""
    return AppRunner(argv).run()


if __name__ == "__main__":
    sys.exit(main())
