"""Load the fonts required before target text can be rewritten."""

import asyncio
from collections.abc import Iterable

from loguru import logger

from frametext.models.leaf import FontName
from frametext.protocols import ResourceLoader, TextNodeProtocol


def required_fonts(nodes: Iterable[TextNodeProtocol]) -> list[FontName]:
    """Distinct fonts used by the given nodes, in first-seen order."""
    seen: dict[FontName, None] = {}
    for node in nodes:
        if isinstance(node.font_name, FontName):
            seen.setdefault(node.font_name, None)
    return list(seen)


async def ensure_fonts_loaded(
    nodes: Iterable[TextNodeProtocol],
    loader: ResourceLoader,
) -> dict[FontName, BaseException]:
    """Load every distinct font used by ``nodes``, concurrently.

    A failing font never cancels the others. Nodes whose font failed are
    left to fail when written.

    Returns:
        Mapping of fonts that could not be loaded to the error raised.
    """
    fonts = required_fonts(nodes)
    if not fonts:
        logger.debug("No fonts to load")
        return {}

    logger.debug("Loading {} unique font(s)", len(fonts))
    results = await asyncio.gather(
        *(loader.load_font(font) for font in fonts), return_exceptions=True
    )

    failures: dict[FontName, BaseException] = {}
    for font, result in zip(fonts, results):
        if isinstance(result, BaseException):
            logger.warning("Could not load font {} {}: {}", font.family, font.style, result)
            failures[font] = result

    if failures:
        logger.info("Loaded {} of {} fonts", len(fonts) - len(failures), len(fonts))
    else:
        logger.debug("All fonts loaded")
    return failures
