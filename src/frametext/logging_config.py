"""Logging setup shared by the CLI and the MCP server."""

import sys
from pathlib import Path

from loguru import logger


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Send frametext logs to stderr, and optionally to a file.

    The MCP server talks over stdout, so nothing here may write there.
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
    if log_file is not None:
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} {level: <8} {name}: {message}",
        )
