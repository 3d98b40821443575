"""Configuration constants for frametext."""

import os
from pathlib import Path

# Key under which the last copied payload is stored.
PAYLOAD_KEY: str = "copyPayload"

# SQLite file holding stored payloads, inside the data directory.
PAYLOAD_DB_NAME: str = "payloads.db"

# Directory with the payload database. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/frametext").expanduser(),
    Path("~/.frametext").expanduser(),
]

DATA_DIR_ENV: str = "FRAMETEXT_DATA_DIR"

# Font sources for paste. A directory of font files, or an HTTP font server.
FONT_DIR_ENV: str = "FRAMETEXT_FONT_DIR"
FONT_URL_ENV: str = "FRAMETEXT_FONT_URL"

# Content overlap is only scored when both texts are longer than this.
MIN_CONTENT_OVERLAP_LENGTH: int = 10

# Number of characters of content quoted in transfer report messages.
DETAIL_PREVIEW_LENGTH: int = 30


def resolve_data_directory() -> Path:
    """Return the data directory: env override, first existing candidate, or the default."""
    env_dir = os.environ.get(DATA_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
