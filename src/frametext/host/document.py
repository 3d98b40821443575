"""JSON scene documents: the host that copy and paste operate on.

A document file holds one node tree. Each node record looks like::

    {"id": "1:2", "type": "TEXT", "name": "Title", "characters": "Hello",
     "fontName": {"family": "Inter", "style": "Bold"}, "fontSize": 24,
     "textStyleId": "S:abc", "locked": false, "children": [...]}

Only ``type`` is required. Keys this module does not know are kept and
written back unchanged. The root may carry a ``selection`` list of node ids,
used when no explicit selection is given.
"""

import json
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from frametext.errors import FontNotLoadedError, NoSelectionError
from frametext.host.fonts import FontRegistry
from frametext.models.leaf import FontName

_KNOWN_KEYS = frozenset(
    {"id", "type", "name", "characters", "fontName", "fontSize", "textStyleId", "locked", "children"}
)


@dataclass(eq=False)
class SceneNode:
    """A node of a scene document. Text nodes carry characters and font data."""

    id: str
    type: str
    name: str = ""
    characters: str = ""
    font_name: FontName | None = None
    font_size: float | None = None
    text_style_id: str | None = None
    locked: bool = False
    children: list["SceneNode"] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict, repr=False)
    fonts: FontRegistry | None = field(default=None, repr=False)

    def set_characters(self, text: str) -> None:
        """Replace this node's text. Its font must be loaded first."""
        if self.type != "TEXT":
            msg = f"Node {self.id!r} is a {self.type}, not a text node"
            raise TypeError(msg)
        if (
            self.font_name is not None
            and self.fonts is not None
            and not self.fonts.is_loaded(self.font_name)
        ):
            msg = (
                f"Cannot write text to {self.name!r}: font "
                f"{self.font_name.family} {self.font_name.style} is not loaded"
            )
            raise FontNotLoadedError(msg)
        self.characters = text


def _parse_node(raw: dict[str, Any], path: tuple[int, ...], fonts: FontRegistry) -> SceneNode:
    extra = {k: v for k, v in raw.items() if k not in _KNOWN_KEYS}

    font_name: FontName | None = None
    raw_font = raw.get("fontName")
    if isinstance(raw_font, dict) and "family" in raw_font and "style" in raw_font:
        font_name = FontName.from_dict(raw_font)
    elif raw_font is not None:
        extra["fontName"] = raw_font

    font_size: float | None = None
    raw_size = raw.get("fontSize")
    if isinstance(raw_size, int | float) and not isinstance(raw_size, bool):
        font_size = raw_size
    elif raw_size is not None:
        extra["fontSize"] = raw_size

    # an empty children record is written back as it was read
    if "children" in raw and not raw["children"]:
        extra["children"] = raw["children"]

    style_id = raw.get("textStyleId")
    if style_id is not None and not isinstance(style_id, str):
        extra["textStyleId"] = style_id
        style_id = None

    return SceneNode(
        id=raw.get("id") or (":".join(str(i) for i in path) if path else "root"),
        type=raw["type"],
        name=raw.get("name", ""),
        characters=raw.get("characters", ""),
        font_name=font_name,
        font_size=font_size,
        text_style_id=style_id,
        locked=bool(raw.get("locked", False)),
        extra=extra,
        fonts=fonts,
    )


def _node_to_dict(node: SceneNode) -> dict[str, Any]:
    data: dict[str, Any] = {"id": node.id, "type": node.type, "name": node.name}
    data.update(node.extra)
    if node.type == "TEXT":
        data["characters"] = node.characters
    if node.font_name is not None:
        data["fontName"] = node.font_name.to_dict()
    if node.font_size is not None:
        data["fontSize"] = node.font_size
    if node.text_style_id is not None:
        data["textStyleId"] = node.text_style_id
    if node.locked:
        data["locked"] = True
    return data


class Document:
    """A scene document loaded from JSON."""

    def __init__(self, root: SceneNode, *, path: Path | None = None, fonts: FontRegistry) -> None:
        self.root = root
        self.path = path
        self.fonts = fonts

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, path: Path | None = None) -> "Document":
        """Build a document from its JSON tree, without recursion."""
        fonts = FontRegistry()
        root = _parse_node(data, (), fonts)
        todo: list[tuple[dict[str, Any], SceneNode, tuple[int, ...]]] = [(data, root, ())]
        while todo:
            raw, node, node_path = todo.pop()
            for i, raw_child in enumerate(raw.get("children") or []):
                child_path = (*node_path, i)
                child = _parse_node(raw_child, child_path, fonts)
                node.children.append(child)
                todo.append((raw_child, child, child_path))
        return cls(root, path=path, fonts=fonts)

    @classmethod
    def load(cls, path: str | Path) -> "Document":
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict) or "type" not in data:
            msg = f"{str(path)!r} is not a scene document (root node needs a 'type')"
            raise ValueError(msg)
        return cls.from_dict(data, path=path)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the tree back to JSON records, without recursion."""
        root_data = _node_to_dict(self.root)
        todo: list[tuple[SceneNode, dict[str, Any]]] = [(self.root, root_data)]
        while todo:
            node, data = todo.pop()
            if node.children:
                data["children"] = []
            for child in node.children:
                child_data = _node_to_dict(child)
                data["children"].append(child_data)
                todo.append((child, child_data))
        return root_data

    def save(self, path: str | Path | None = None) -> Path:
        target = Path(path) if path is not None else self.path
        if target is None:
            msg = "Document has no path; pass one to save()"
            raise ValueError(msg)
        target.write_text(
            json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        return target

    def iter_nodes(self) -> Iterator[SceneNode]:
        """Yield all nodes in pre-order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, node_id: str) -> SceneNode | None:
        return next((n for n in self.iter_nodes() if n.id == node_id), None)

    @property
    def selection(self) -> list[str]:
        """Node ids stored as the document's current selection."""
        return list(self.root.extra.get("selection") or [])


class DocumentSelection:
    """Selection of nodes by id within a document.

    With no explicit ids, the document's stored selection is used.
    """

    def __init__(self, document: Document, node_ids: Sequence[str] | None = None) -> None:
        self.document = document
        self.node_ids = list(node_ids) if node_ids else document.selection

    def get_selection(self) -> list[SceneNode]:
        nodes: list[SceneNode] = []
        for node_id in self.node_ids:
            node = self.document.find(node_id)
            if node is None:
                msg = f"Selected node {node_id!r} not found in document"
                raise NoSelectionError(msg)
            nodes.append(node)
        return nodes
