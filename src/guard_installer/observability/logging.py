"""
Structured logging utilities for the Guard installer.

This module provides a JSON log formatter and a one-call logging setup so
installer runs can be parsed by log aggregation pipelines.
"""

import json
import logging
from datetime import UTC, datetime

# Extra attributes copied into JSON log records when present
STRUCTURED_FIELDS = (
    "resource_name",
    "namespace",
    "operation",
    "field",
    "error_count",
    "error_type",
)


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs.

    Formats log records as structured JSON for better parsing and analysis
    in production monitoring systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as structured JSON.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log message
        """
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # extra= values are set as attributes on the record
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data)


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = False,
) -> None:
    """
    Set up logging for the installer.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
    """
    root_logger = logging.getLogger()

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Logs go to stderr so rendered manifests on stdout stay clean
    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    logging.getLogger("kubernetes").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
