"""Secure logging for hook processes.

Hook processes share stderr with the host: on the canonical host, stderr
is shown to the user when a hook blocks.  Logging therefore goes to a single
stderr handler at ``WARNING`` by default, and every record is passed through
a masking step so secrets seen in tool input never leak into diagnostics.

Features:
    - Sensitive data masking (API keys, passwords, bearer tokens)
    - ``[claude-hooks]`` prefix so diagnostics are distinguishable from
      handler stderr
    - Optional JSON structured format
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

LOG_PREFIX = "[claude-hooks]"

# Patterns to mask in logs
SENSITIVE_PATTERNS = [
    (re.compile(r'api[_-]?key["\']?\s*[:=]\s*["\']?[\w-]+', re.I), "api_key=***MASKED***"),
    (re.compile(r"sk-[a-zA-Z0-9]{20,}"), "***API_KEY***"),
    (re.compile(r'password["\']?\s*[:=]\s*["\']?[^\s"\']+', re.I), "password=***MASKED***"),
    (re.compile(r"Bearer\s+[A-Za-z0-9._~+/=-]+", re.I), "Bearer ***MASKED***"),
]


def mask_sensitive(message: str) -> str:
    """Apply every masking pattern to *message*."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class SecureFormatter(logging.Formatter):
    """Formatter that masks sensitive data and prefixes the toolkit tag."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        include_prefix: bool = True,
    ) -> None:
        """Initialize the secure formatter.

        Args:
            fmt: Format string for log messages.
            datefmt: Date format string.
            include_prefix: Whether to prepend ``[claude-hooks]``.
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.include_prefix = include_prefix

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if self.include_prefix:
            message = f"{LOG_PREFIX} {message}"
        return mask_sensitive(message)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, mask: bool = True) -> None:
        super().__init__()
        self.mask = mask

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON, masking sensitive data unless disabled.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted log message.
        """
        log_data: dict[str, str | None] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        rendered = json.dumps(log_data)
        return mask_sensitive(rendered) if self.mask else rendered


def configure_logging(
    level: str = "WARNING",
    json_format: bool = False,
    mask: bool = True,
) -> None:
    """Configure logging for a hook process.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        json_format: Use JSON format for structured logging.
        mask: Mask sensitive data in logs.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # StreamHandler defaults to stderr; stdout is reserved for hook output
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if json_format:
        formatter: logging.Formatter = JSONFormatter(mask=mask)
    elif mask:
        formatter = SecureFormatter(fmt="%(levelname)s: %(message)s")
    else:
        formatter = logging.Formatter(fmt=f"{LOG_PREFIX} %(levelname)s: %(message)s")

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
