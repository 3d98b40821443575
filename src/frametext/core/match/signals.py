"""Scoring signals for pairing source and target text leaves.

Each signal measures one kind of evidence that two leaves correspond. The
weights are ordered so a stronger signal outweighs any combination of the
weaker ones that can realistically co-occur: exact path, then name, then
text style, then font, then content overlap and path proximity.
"""

from collections.abc import Callable
from dataclasses import dataclass

from frametext.config import MIN_CONTENT_OVERLAP_LENGTH
from frametext.models.leaf import LeafItem

Measure = Callable[[LeafItem, LeafItem], float]


@dataclass(frozen=True)
class Signal:
    """A named scoring rule. Contributes ``weight * measure(source, target)``."""

    name: str
    weight: float
    measure: Measure


def same_path(source: LeafItem, target: LeafItem) -> float:
    return 1.0 if source.path == target.path else 0.0


def same_name(source: LeafItem, target: LeafItem) -> float:
    return 1.0 if source.name and source.name == target.name else 0.0


def same_text_style(source: LeafItem, target: LeafItem) -> float:
    style_id = source.attributes.text_style_id
    return 1.0 if style_id and style_id == target.attributes.text_style_id else 0.0


def same_font_family(source: LeafItem, target: LeafItem) -> float:
    """Match font families, only when both sides carry a font and a size."""
    src, dst = source.attributes, target.attributes
    if not (src.font_name and dst.font_name and src.font_size and dst.font_size):
        return 0.0
    return 1.0 if src.font_name.family == dst.font_name.family else 0.0


def same_font_size(source: LeafItem, target: LeafItem) -> float:
    """Bonus for equal sizes, given on top of a font family match."""
    if not same_font_family(source, target):
        return 0.0
    return 1.0 if source.attributes.font_size == target.attributes.font_size else 0.0


def shared_words(source: LeafItem, target: LeafItem) -> float:
    """Count source words that also occur in the target text.

    Repeated source words count each time. Short texts are ignored.
    """
    if (
        len(source.content) <= MIN_CONTENT_OVERLAP_LENGTH
        or len(target.content) <= MIN_CONTENT_OVERLAP_LENGTH
    ):
        return 0.0
    target_words = set(target.content.lower().split())
    return float(sum(1 for word in source.content.lower().split() if word in target_words))


def path_similarity(path1: tuple[int, ...], path2: tuple[int, ...]) -> float:
    """Common leading prefix length over the longer path's length, in [0, 1]."""
    if not path1 or not path2:
        return 0.0
    common = 0
    for a, b in zip(path1, path2):
        if a != b:
            break
        common += 1
    return common / max(len(path1), len(path2))


def path_proximity(source: LeafItem, target: LeafItem) -> float:
    return path_similarity(source.path, target.path)


DEFAULT_SIGNALS: tuple[Signal, ...] = (
    Signal("path", 1000, same_path),
    Signal("name", 500, same_name),
    Signal("text_style", 300, same_text_style),
    Signal("font_family", 200, same_font_family),
    Signal("font_size", 100, same_font_size),
    Signal("content", 10, shared_words),
    Signal("path_prefix", 50, path_proximity),
)


def score_pair(
    source: LeafItem,
    target: LeafItem,
    signals: tuple[Signal, ...] = DEFAULT_SIGNALS,
) -> float:
    """Sum every signal's contribution for one leaf pair."""
    return sum(signal.weight * signal.measure(source, target) for signal in signals)


def explain_pair(
    source: LeafItem,
    target: LeafItem,
    signals: tuple[Signal, ...] = DEFAULT_SIGNALS,
) -> dict[str, float]:
    """Return the nonzero contribution of each signal, keyed by signal name."""
    breakdown = {signal.name: signal.weight * signal.measure(source, target) for signal in signals}
    return {name: value for name, value in breakdown.items() if value}
