"""Shared test fixtures: a sample card frame and a scene document on disk."""

import json
from pathlib import Path
from typing import Any

import pytest

from frametext.host.document import SceneNode
from tests.unit.builders import INTER_BOLD, frame, group, text


@pytest.fixture
def card_frame() -> SceneNode:
    """A card: heading, a group with body and caption, and a decorative rectangle."""
    return frame(
        "Card",
        text("Heading", "Welcome aboard", font=INTER_BOLD, size=24, style_id="S:heading"),
        group(
            "Content",
            text("Body", "Our product helps teams ship faster than ever before"),
            text("Caption", "Updated daily", size=12),
        ),
        SceneNode(id="rect-1", type="RECTANGLE", name="Background"),
    )


SCENE_DOCUMENT: dict[str, Any] = {
    "id": "0:0",
    "type": "DOCUMENT",
    "name": "Landing page",
    "selection": ["1:1"],
    "children": [
        {
            "id": "1:1",
            "type": "FRAME",
            "name": "English",
            "fills": [{"type": "SOLID", "color": "#ffffff"}],
            "children": [
                {
                    "id": "1:2",
                    "type": "TEXT",
                    "name": "Title",
                    "characters": "Hello",
                    "fontName": {"family": "Inter", "style": "Bold"},
                    "fontSize": 32,
                    "textStyleId": "S:title",
                },
                {
                    "id": "1:3",
                    "type": "TEXT",
                    "name": "Body",
                    "characters": "Build beautiful things together",
                    "fontName": {"family": "Inter", "style": "Regular"},
                    "fontSize": 16,
                },
            ],
        },
        {
            "id": "2:1",
            "type": "FRAME",
            "name": "German",
            "children": [
                {
                    "id": "2:2",
                    "type": "TEXT",
                    "name": "Title",
                    "characters": "Hallo",
                    "fontName": {"family": "Inter", "style": "Bold"},
                    "fontSize": 32,
                    "textStyleId": "S:title",
                },
                {
                    "id": "2:3",
                    "type": "TEXT",
                    "name": "Body",
                    "characters": "Gemeinsam schöne Dinge bauen",
                    "fontName": {"family": "Inter", "style": "Regular"},
                    "fontSize": 16,
                    "locked": True,
                },
            ],
        },
        {"id": "3:1", "type": "RECTANGLE", "name": "Not a frame"},
    ],
}


@pytest.fixture
def scene_path(tmp_path: Path) -> Path:
    """Write the sample scene document to disk and return its path."""
    path = tmp_path / "landing.json"
    path.write_text(json.dumps(SCENE_DOCUMENT))
    return path
