"""Pair source text leaves with target text leaves."""

from collections.abc import Sequence

from loguru import logger

from frametext.core.match.signals import DEFAULT_SIGNALS, Signal, explain_pair, score_pair
from frametext.models.leaf import DocumentSnapshot, LeafItem
from frametext.models.transfer import Assignment, Candidate, SkipReason


def build_candidates(
    source_items: Sequence[LeafItem],
    target_items: Sequence[LeafItem],
    signals: tuple[Signal, ...] = DEFAULT_SIGNALS,
) -> list[list[Candidate]]:
    """Score every source/target pair.

    Returns one list per source leaf, in source order, holding its nonzero
    candidates sorted by descending score. The sort is stable, so equal
    scores keep target traversal order.
    """
    matrix: list[list[Candidate]] = []
    for source_index, source in enumerate(source_items):
        scores: list[Candidate] = []
        for target_index, target in enumerate(target_items):
            score = score_pair(source, target, signals)
            if score > 0:
                scores.append(Candidate(source_index, target_index, score))
        scores.sort(key=lambda c: c.score, reverse=True)
        matrix.append(scores)
    return matrix


def resolve_assignment(candidate_lists: Sequence[Sequence[Candidate]]) -> Assignment:
    """Greedily give each source leaf its best still-unclaimed target.

    Sources are served in order, and an earlier source keeps a target even
    if a later one would have scored higher on it. There is no backtracking.
    """
    claimed: set[int] = set()
    pairs: dict[int, Candidate] = {}
    unmapped: dict[int, SkipReason] = {}

    for source_index, candidates in enumerate(candidate_lists):
        if not candidates:
            unmapped[source_index] = SkipReason.NO_CANDIDATE
            continue
        best = next((c for c in candidates if c.target_index not in claimed), None)
        if best is None:
            unmapped[source_index] = SkipReason.ALL_CANDIDATES_CLAIMED
            continue
        claimed.add(best.target_index)
        pairs[source_index] = best

    return Assignment(pairs=pairs, unmapped=unmapped)


def match_snapshots(
    source: DocumentSnapshot,
    target: DocumentSnapshot,
    signals: tuple[Signal, ...] = DEFAULT_SIGNALS,
) -> Assignment:
    """Compute the leaf assignment from a source snapshot onto a target snapshot.

    Each resolved pair also gets its per-signal score breakdown.
    """
    logger.debug("Matching {} source leaves against {} target leaves", len(source), len(target))
    resolved = resolve_assignment(build_candidates(source.items, target.items, signals))
    assignment = Assignment(
        pairs=resolved.pairs,
        unmapped=resolved.unmapped,
        breakdowns={
            i: explain_pair(source.items[i], target.items[c.target_index], signals)
            for i, c in resolved.pairs.items()
        },
    )
    logger.info(
        "Matched {} of {} source leaves ({} unmapped)",
        len(assignment.pairs), len(source), len(assignment.unmapped),
    )
    return assignment
