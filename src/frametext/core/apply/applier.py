"""Write matched source content into target text nodes."""

import math
from collections.abc import Callable, Sequence

from loguru import logger

from frametext.config import DETAIL_PREVIEW_LENGTH
from frametext.core.apply.fonts import ensure_fonts_loaded
from frametext.models.leaf import LeafItem
from frametext.models.transfer import Assignment, SkipReason, TransferReport
from frametext.protocols import ResourceLoader, TextNodeProtocol

ProgressCallback = Callable[[int], object]


def _preview(content: str) -> str:
    return f'"{content[:DETAIL_PREVIEW_LENGTH]}..."'


def _format_score(score: float) -> str:
    return f"{score:.2f}".rstrip("0").rstrip(".")


def _percent(done: int, total: int) -> int:
    """Percent complete, rounding halves up."""
    return math.floor(done / total * 100 + 0.5)


def _notify_progress(on_progress: ProgressCallback | None, percent: int) -> None:
    if on_progress is None:
        return
    try:
        on_progress(percent)
    except Exception:
        logger.opt(exception=True).warning("Progress callback failed at {}%", percent)


async def apply_assignment(
    source_items: Sequence[LeafItem],
    assignment: Assignment,
    target_nodes: Sequence[TextNodeProtocol],
    *,
    loader: ResourceLoader,
    on_progress: ProgressCallback | None = None,
) -> TransferReport:
    """Transfer content along each assigned pair.

    Fonts for all target nodes are loaded once, before anything is written.
    Each source leaf is then handled in order; problems with one leaf are
    recorded in the report and never stop the others.

    Args:
        source_items: Source leaves, in traversal order.
        assignment: Resolved mapping from source to target indices.
        target_nodes: Live target nodes, indexed like the target snapshot.
        loader: Font loader used before writing.
        on_progress: Called with the percent complete after each source leaf.

    Returns:
        TransferReport with one detail per source leaf.
    """
    await ensure_fonts_loaded(target_nodes, loader)

    report = TransferReport()
    total = len(source_items)

    for i, source in enumerate(source_items):
        candidate = assignment.pairs.get(i)
        if candidate is None:
            reason = assignment.unmapped.get(i, SkipReason.NO_CANDIDATE)
            if reason is SkipReason.ALL_CANDIDATES_CLAIMED:
                message = f"All suitable targets already used for: {_preview(source.content)}"
            else:
                message = f"No suitable target found for: {_preview(source.content)}"
            report.record_skip(i, reason, message)
        else:
            target = target_nodes[candidate.target_index]
            if target.locked:
                report.record_skip(
                    i,
                    SkipReason.TARGET_LOCKED,
                    f"Skipping locked text node: {target.name}",
                    target_index=candidate.target_index,
                )
            else:
                try:
                    target.set_characters(source.content)
                except Exception as e:
                    logger.debug("Write to {!r} failed: {}", target.name, e)
                    report.record_skip(
                        i,
                        SkipReason.WRITE_FAILED,
                        f"Failed to map text: {e}",
                        target_index=candidate.target_index,
                        error=str(e),
                    )
                else:
                    report.record_transfer(
                        i,
                        candidate.target_index,
                        candidate.score,
                        f"Mapped text (score: {_format_score(candidate.score)}): "
                        f"{_preview(source.content)}",
                        signals=assignment.breakdowns.get(i),
                    )

        _notify_progress(on_progress, _percent(i + 1, total))

    logger.info("Mapping complete: {} mapped, {} skipped", report.transferred, report.skipped)
    return report
