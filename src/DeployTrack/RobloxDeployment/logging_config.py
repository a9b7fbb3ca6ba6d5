"""
Structured Logging Utilities

This module centralizes logging setup for deploy lookups. It provides a JSON
formatter for machine-readable output, a helper that installs exactly one
managed console handler on the package logger, and correlation identifiers
that tie together the log lines of a single lookup (including the nested
default-channel lookup and the manifest enrichment it may trigger).
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import IO, Optional

PACKAGE_LOGGER = "DeployTrack.RobloxDeployment"


def generate_correlation_id() -> str:
    """Create a short-lived identifier that links related log entries.

    Returns:
        Twelve character hexadecimal identifier.

    Examples:
        >>> cid = generate_correlation_id()
        >>> len(cid)
        12
    """
    return uuid.uuid4().hex[:12]


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record.

    Examples:
        >>> formatter = JSONFormatter()
        >>> isinstance(formatter.format(logging.makeLogRecord({'msg': 'test'})), str)
        True
    """

    def format(self, record: logging.LogRecord) -> str:
        """Serialize a logging record into a JSON line.

        Args:
            record: Log record emitted by the deploy lookup components.

        Returns:
            JSON string carrying the message plus channel and correlation context.
        """
        now = datetime.now(timezone.utc)
        log_obj = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", None),
            "channel": getattr(record, "channel", None),
        }
        for key in ("origin", "url", "status_code"):
            value = getattr(record, key, None)
            if value is not None:
                log_obj[key] = value
        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)


def setup_logging(
    level: Optional[str] = None,
    *,
    json_format: Optional[bool] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Configure the package logger with a single managed console handler.

    Args:
        level: Logging level name; defaults to the configured ``log_level``.
        json_format: Emit JSON lines instead of plain text; defaults to the
            configured ``log_json``.
        stream: Output stream, ``sys.stderr`` when omitted.

    Returns:
        The configured package logger.

    Examples:
        >>> logger = setup_logging("DEBUG", json_format=False)
        >>> logger.name
        'DeployTrack.RobloxDeployment'
    """
    if level is None or json_format is None:
        from .settings import get_settings  # Local import to avoid circular dependency

        settings = get_settings()
        level = level or settings.log_level
        json_format = settings.log_json if json_format is None else json_format

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_rbxdeploy_managed", False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handler._rbxdeploy_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    logger.propagate = True

    return logger


__all__ = ["JSONFormatter", "PACKAGE_LOGGER", "generate_correlation_id", "setup_logging"]
