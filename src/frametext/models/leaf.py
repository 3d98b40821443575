"""Domain models for indexed text leaves and copy payloads."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FontName:
    """A font face that must be loaded before text using it can change."""

    family: str
    style: str

    def to_dict(self) -> dict[str, str]:
        return {"family": self.family, "style": self.style}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FontName":
        return cls(family=data["family"], style=data["style"])


@dataclass(frozen=True)
class LeafAttributes:
    """Secondary metadata of a text leaf, used only to break ties."""

    font_size: float | None = None
    font_name: FontName | None = None
    text_style_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fontSize": self.font_size,
            "fontName": self.font_name.to_dict() if self.font_name else None,
            "textStyleId": self.text_style_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeafAttributes":
        font_name = data.get("fontName")
        return cls(
            font_size=data.get("fontSize"),
            font_name=FontName.from_dict(font_name) if font_name else None,
            text_style_id=data.get("textStyleId"),
        )


@dataclass(frozen=True)
class LeafItem:
    """A single text-bearing node found while indexing a subtree."""

    path: tuple[int, ...]
    content: str
    name: str | None = None
    attributes: LeafAttributes = LeafAttributes()

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": list(self.path),
            "name": self.name,
            "characters": self.content,
            **self.attributes.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeafItem":
        return cls(
            path=tuple(data["path"]),
            content=data["characters"],
            name=data.get("name"),
            attributes=LeafAttributes.from_dict(data),
        )


@dataclass(frozen=True)
class DocumentStructure:
    """Aggregate stats of an indexed subtree. Reporting only."""

    node_count: int
    text_node_count: int
    max_depth: int
    layer_names: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodeCount": self.node_count,
            "textNodeCount": self.text_node_count,
            "maxDepth": self.max_depth,
            "layerNames": list(self.layer_names),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentStructure":
        return cls(
            node_count=data["nodeCount"],
            text_node_count=data["textNodeCount"],
            max_depth=data["maxDepth"],
            layer_names=tuple(data.get("layerNames", ())),
        )


@dataclass(frozen=True)
class DocumentSnapshot:
    """Text leaves of a subtree in traversal order, plus structure stats."""

    items: tuple[LeafItem, ...]
    structure: DocumentStructure

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class CopyPayload:
    """Everything a copy operation retains for a later paste."""

    source_frame_id: str
    source_frame_name: str
    captured_at: int
    snapshot: DocumentSnapshot

    @property
    def items(self) -> tuple[LeafItem, ...]:
        return self.snapshot.items

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain JSON-compatible records for the payload store."""
        return {
            "sourceFrameId": self.source_frame_id,
            "sourceFrameName": self.source_frame_name,
            "capturedAt": self.captured_at,
            "items": [item.to_dict() for item in self.snapshot.items],
            "frameStructure": self.snapshot.structure.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CopyPayload":
        """Rebuild a payload from the records produced by to_dict()."""
        return cls(
            source_frame_id=data["sourceFrameId"],
            source_frame_name=data["sourceFrameName"],
            captured_at=data["capturedAt"],
            snapshot=DocumentSnapshot(
                items=tuple(LeafItem.from_dict(item) for item in data["items"]),
                structure=DocumentStructure.from_dict(data["frameStructure"]),
            ),
        )
