"""Protocols for the host collaborators a copy or paste depends on."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from frametext.models.leaf import FontName


@runtime_checkable
class TreeNodeProtocol(Protocol):
    """A node of a host document tree."""

    id: str
    type: str
    name: str

    @property
    def children(self) -> Sequence["TreeNodeProtocol"] | None:
        """Child nodes in left-to-right order, or None for nodes that cannot have any."""
        ...


@runtime_checkable
class TextNodeProtocol(TreeNodeProtocol, Protocol):
    """A text-bearing node whose characters can be rewritten."""

    characters: str
    font_name: FontName | None
    font_size: float | None
    text_style_id: str | None
    locked: bool

    def set_characters(self, text: str) -> None:
        """Replace the node's text. May raise if the node cannot be written."""
        ...


@runtime_checkable
class SelectionProvider(Protocol):
    """Source of the user's current selection."""

    def get_selection(self) -> Sequence[TreeNodeProtocol]:
        """Return the currently selected nodes."""
        ...


@runtime_checkable
class ResourceLoader(Protocol):
    """Makes fonts available before text using them is written."""

    async def load_font(self, font: FontName) -> None:
        """Load a font, raising if it cannot be made available."""
        ...


@runtime_checkable
class PayloadStore(Protocol):
    """Key-value store retaining the last copied payload across sessions."""

    async def put(self, key: str, value: dict[str, Any]) -> None:
        """Store a JSON-compatible record, replacing any previous value."""
        ...

    async def get(self, key: str) -> dict[str, Any] | None:
        """Return the stored record, or None if absent."""
        ...

    async def clear(self, key: str) -> None:
        """Remove the stored record."""
        ...


@runtime_checkable
class ProgressSink(Protocol):
    """Receives progress updates and terminal summaries."""

    def progress(self, percent: int) -> None:
        """Report percent complete (0-100)."""
        ...

    def success(self, summary: dict[str, Any]) -> None:
        """Report a completed operation."""
        ...

    def error(self, message: str) -> None:
        """Report a failed operation."""
        ...
