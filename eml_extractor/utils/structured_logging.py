"""
Structured Logging Module
Provides JSON-formatted logging for scripted runs (one JSON object per line)
"""

import json
import logging


class JSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs log records as JSON.

    PATTERN RECOGNITION: When the extractor runs inside a batch job, its
    warnings (skipped parts, undecodable charsets, unwritable attachments)
    are easier to collect with jq than by parsing free-form text.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: Python logging.LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # logger.info("msg", extra={"extra_fields": {"attachment": name}})
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            for key, value in extra_fields.items():
                log_data.setdefault(key, value)

        return json.dumps(log_data, default=str)
