"""Font loaders that make fonts available to a document before writes."""

import asyncio
import os
import re
from pathlib import Path
from urllib.parse import quote

import requests
from loguru import logger

from frametext.config import FONT_DIR_ENV, FONT_URL_ENV
from frametext.errors import FontLoadError
from frametext.models.leaf import FontName

FONT_FILE_SUFFIXES: tuple[str, ...] = (".ttf", ".otf", ".woff", ".woff2")


class FontRegistry:
    """Fonts currently loaded for a document."""

    def __init__(self) -> None:
        self._loaded: set[FontName] = set()

    def register(self, font: FontName) -> None:
        self._loaded.add(font)

    def is_loaded(self, font: FontName) -> bool:
        return font in self._loaded

    def __len__(self) -> int:
        return len(self._loaded)


def _normalize(name: str) -> str:
    return re.sub(r"[\s_-]+", "", name).lower()


class NullFontLoader:
    """Treat every font as available. Used when no font source is configured."""

    def __init__(self, registry: FontRegistry) -> None:
        self.registry = registry

    async def load_font(self, font: FontName) -> None:
        self.registry.register(font)


class LocalFontLoader:
    """Resolve fonts from a directory of font files.

    A font is found when a file named after its family and style exists,
    ignoring case, spaces, dashes and underscores: ``Inter-Bold.ttf`` and
    ``inter_bold.otf`` both provide Inter / Bold.
    """

    def __init__(self, font_dir: str | Path, registry: FontRegistry) -> None:
        self.font_dir = Path(font_dir).expanduser()
        self.registry = registry
        self._index: dict[str, Path] | None = None

    def _scan(self) -> dict[str, Path]:
        if self._index is None:
            if not self.font_dir.is_dir():
                msg = f"Font directory {str(self.font_dir)!r} not found"
                raise FontLoadError(msg)
            self._index = {
                _normalize(p.stem): p
                for p in sorted(self.font_dir.rglob("*"))
                if p.suffix.lower() in FONT_FILE_SUFFIXES
            }
            logger.debug("Found {} font files in {}", len(self._index), self.font_dir)
        return self._index

    async def load_font(self, font: FontName) -> None:
        path = self._scan().get(_normalize(font.family + font.style))
        if path is None:
            msg = f"Font {font.family} {font.style} not found in {str(self.font_dir)!r}"
            raise FontLoadError(msg, family=font.family, style=font.style)
        logger.debug("Font {} {} resolved to {}", font.family, font.style, path.name)
        self.registry.register(font)


class HttpFontLoader:
    """Resolve fonts against an HTTP font server.

    A font is available when ``GET {base_url}/{family}/{style}`` succeeds.
    Requests run in worker threads so several fonts resolve concurrently.
    """

    def __init__(self, base_url: str, registry: FontRegistry, *, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.registry = registry
        self.timeout = timeout
        self.sess = requests.Session()
        logger.debug("HTTP font loader ready: {!r}, timeout {}s", self.base_url, timeout)

    def font_url(self, font: FontName) -> str:
        return f"{self.base_url}/{quote(font.family, safe='')}/{quote(font.style, safe='')}"

    def _fetch(self, font: FontName) -> None:
        url = self.font_url(font)
        logger.debug("Making request: {!r}", url)
        try:
            r = self.sess.get(url, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            msg = f"Font {font.family} {font.style} could not be fetched: {e}"
            raise FontLoadError(msg, family=font.family, style=font.style) from e

    async def load_font(self, font: FontName) -> None:
        await asyncio.to_thread(self._fetch, font)
        self.registry.register(font)


def make_font_loader(
    registry: FontRegistry,
    *,
    font_dir: Path | None = None,
    font_url: str | None = None,
) -> LocalFontLoader | HttpFontLoader | NullFontLoader:
    """Pick a font loader: explicit options first, then environment, else none."""
    if font_dir is None and os.environ.get(FONT_DIR_ENV):
        font_dir = Path(os.environ[FONT_DIR_ENV])
    font_url = font_url or os.environ.get(FONT_URL_ENV)
    if font_dir is not None:
        return LocalFontLoader(font_dir, registry)
    if font_url:
        return HttpFontLoader(font_url, registry)
    return NullFontLoader(registry)
