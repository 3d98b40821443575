"""Tests for logging setup."""

import sys
from pathlib import Path

from loguru import logger

from frametext.logging_config import configure_logging


def test_log_file_receives_debug_messages(tmp_path: Path) -> None:
    log_file = tmp_path / "frametext.log"
    configure_logging(verbose=False, log_file=log_file)
    try:
        logger.debug("indexing frame {!r}", "Hero")
    finally:
        logger.remove()
        logger.add(sys.stderr)

    assert "indexing frame 'Hero'" in log_file.read_text()
