"""Tests for candidate scoring and greedy assignment."""

from frametext.core.match.matcher import build_candidates, match_snapshots, resolve_assignment
from frametext.core.tree.indexer import index_text_nodes
from frametext.host.document import SceneNode
from frametext.models.leaf import DocumentSnapshot, DocumentStructure, FontName, LeafItem
from frametext.models.transfer import Candidate, SkipReason
from tests.unit.builders import INTER_BOLD, frame, group, text

ROBOTO = FontName("Roboto", "Regular")


def snapshot(*items: LeafItem) -> DocumentSnapshot:
    return DocumentSnapshot(items=items, structure=DocumentStructure(len(items), len(items), 1))


def test_identical_structures_pair_every_leaf_by_path(card_frame) -> None:
    source = index_text_nodes(card_frame).snapshot
    target = index_text_nodes(card_frame).snapshot

    assignment = match_snapshots(source, target)

    assert assignment.unmapped == {}
    for i in range(len(source)):
        assert assignment.target_for(i) == i
        assert assignment.pairs[i].score >= 1000


def test_title_and_body_matched_by_name_and_style() -> None:
    source = index_text_nodes(
        frame(
            "EN",
            text("Title", "Hello", font=INTER_BOLD, size=32, style_id="S:title"),
            text("Body", "Build beautiful things together"),
        )
    ).snapshot
    # target wraps the layers in a group and swaps them, so no path matches
    target = index_text_nodes(
        frame(
            "DE",
            group(
                "Wrap",
                text("Body", "Gemeinsam schöne Dinge bauen"),
                text("Title", "Hallo", font=INTER_BOLD, size=32, style_id="S:title"),
            ),
        )
    ).snapshot

    assignment = match_snapshots(source, target)

    assert assignment.target_for(0) == 1
    assert assignment.target_for(1) == 0
    assert assignment.breakdowns[0] == {
        "name": 500,
        "text_style": 300,
        "font_family": 200,
        "font_size": 100,
        "path_prefix": 25,
    }


def test_body_falls_back_to_unnamed_leaf_with_matching_font() -> None:
    source = index_text_nodes(
        frame(
            "EN",
            text("Title", "Hello", font=INTER_BOLD, size=32, style_id="S:title"),
            text("Body", "Build beautiful things together"),
        )
    ).snapshot
    target = index_text_nodes(
        frame(
            "DE",
            text("Title", "Hallo", font=INTER_BOLD, size=32, style_id="S:title"),
            group("Wrap", text("", "Gemeinsam schöne Dinge bauen")),
        )
    ).snapshot

    assignment = match_snapshots(source, target)

    assert target.items[1].name is None
    assert assignment.pairs[0].score >= 500
    assert assignment.target_for(0) == 0
    assert assignment.target_for(1) == 1
    assert assignment.breakdowns[1] == {"font_family": 200, "font_size": 100, "path_prefix": 25}


def test_body_without_any_evidence_is_skipped() -> None:
    source = index_text_nodes(
        frame(
            "EN",
            text("Title", "Hello", font=INTER_BOLD, size=32, style_id="S:title"),
            text("Body", "Build beautiful things together"),
        )
    ).snapshot
    # unnamed leaf shares no path prefix, font or words with the source body
    target = index_text_nodes(
        frame(
            "DE",
            group("Wrap", text("", "Gemeinsam schöne Dinge bauen", font=None, size=None)),
            SceneNode(id="bg", type="RECTANGLE", name="Background"),
            text("Title", "Hallo", font=ROBOTO, size=32, style_id="S:title"),
        )
    ).snapshot

    assignment = match_snapshots(source, target)

    assert assignment.target_for(0) == 1
    assert assignment.pairs[0].score >= 500
    assert assignment.unmapped == {1: SkipReason.NO_CANDIDATE}


def test_surplus_sources_are_unmapped_with_reason() -> None:
    source = snapshot(
        LeafItem((0,), "first", name="Label"),
        LeafItem((1,), "second", name="Label"),
    )
    target = snapshot(LeafItem((5,), "only", name="Label"))

    assignment = match_snapshots(source, target)

    assert assignment.target_for(0) == 0
    assert assignment.unmapped == {1: SkipReason.ALL_CANDIDATES_CLAIMED}


def test_source_without_candidates_is_unmapped() -> None:
    source = snapshot(LeafItem((0,), "x", name="A"))
    target = snapshot(LeafItem((1,), "y", name="B"))

    assignment = match_snapshots(source, target)

    assert assignment.pairs == {}
    assert assignment.unmapped == {0: SkipReason.NO_CANDIDATE}


def test_empty_target_leaves_everything_unmapped(card_frame) -> None:
    source = index_text_nodes(card_frame).snapshot

    assignment = match_snapshots(source, snapshot())

    assert set(assignment.unmapped) == {0, 1, 2}
    assert all(r is SkipReason.NO_CANDIDATE for r in assignment.unmapped.values())


def test_empty_source_gives_empty_assignment(card_frame) -> None:
    assignment = match_snapshots(snapshot(), index_text_nodes(card_frame).snapshot)

    assert assignment.pairs == {}
    assert assignment.unmapped == {}


def test_assignment_is_injective_and_total() -> None:
    root = frame(
        "F",
        group("A", text("Label", "one"), text("Label", "two"), text("Label", "three")),
        group("B", text("Label", "four"), text("Other", "five")),
    )
    items = index_text_nodes(root).snapshot
    target = index_text_nodes(frame("G", group("A", text("Label", "a"), text("Label", "b")))).snapshot

    assignment = match_snapshots(items, target)

    targets = [c.target_index for c in assignment.pairs.values()]
    assert len(targets) == len(set(targets))
    assert set(assignment.pairs) | set(assignment.unmapped) == set(range(len(items)))
    assert not set(assignment.pairs) & set(assignment.unmapped)


def test_earlier_source_keeps_target_without_backtracking() -> None:
    candidates = [
        [Candidate(0, 0, 60), Candidate(0, 1, 50)],
        [Candidate(1, 0, 1000)],
    ]

    assignment = resolve_assignment(candidates)

    assert assignment.target_for(0) == 0
    assert assignment.unmapped == {1: SkipReason.ALL_CANDIDATES_CLAIMED}


def test_candidates_sorted_by_score_with_stable_ties() -> None:
    source = [LeafItem((0,), "s", name="N")]
    targets = [
        LeafItem((9,), "a", name="N"),
        LeafItem((0,), "b"),
        LeafItem((8,), "c", name="N"),
        LeafItem((7,), "d"),
    ]

    (row,) = build_candidates(source, targets)

    assert [c.target_index for c in row] == [1, 0, 2]
    assert row[1].score == row[2].score == 500


def test_matching_is_deterministic(card_frame) -> None:
    source = index_text_nodes(card_frame).snapshot
    target = index_text_nodes(
        frame("Other", text("Caption", "x", size=12), text("Heading", "y"))
    ).snapshot

    assert match_snapshots(source, target) == match_snapshots(source, target)
