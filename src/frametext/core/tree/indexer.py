"""Index the text leaves of a document subtree."""

from dataclasses import dataclass

from loguru import logger

from frametext.models.leaf import (
    DocumentSnapshot,
    DocumentStructure,
    FontName,
    LeafAttributes,
    LeafItem,
)
from frametext.protocols import TextNodeProtocol, TreeNodeProtocol

TEXT_NODE_TYPE = "TEXT"


@dataclass(frozen=True)
class IndexResult:
    """A snapshot plus the live text nodes it was taken from.

    ``nodes[i]`` is the node that produced ``snapshot.items[i]``.
    """

    snapshot: DocumentSnapshot
    nodes: tuple[TextNodeProtocol, ...]


def _leaf_attributes(node: TextNodeProtocol) -> LeafAttributes:
    font_size = node.font_size
    if isinstance(font_size, bool) or not isinstance(font_size, int | float):
        font_size = None
    font_name = node.font_name if isinstance(node.font_name, FontName) else None
    style_id = node.text_style_id if isinstance(node.text_style_id, str) else None
    return LeafAttributes(font_size=font_size, font_name=font_name, text_style_id=style_id or None)


def index_text_nodes(root: TreeNodeProtocol) -> IndexResult:
    """Walk a subtree depth-first and collect its text leaves.

    Uses an explicit stack, so arbitrarily deep trees do not hit the
    recursion limit. Children are pushed in reverse so they are visited
    left to right; leaf order is therefore the natural document order.

    Args:
        root: Subtree root. Its own path is the empty tuple.

    Returns:
        IndexResult with the snapshot and the matching live text nodes.
    """
    logger.debug("Indexing text nodes in {!r}", root.name)
    items: list[LeafItem] = []
    nodes: list[TextNodeProtocol] = []
    layer_names: list[str] = []
    node_count = 0
    max_depth = 0

    stack: list[tuple[TreeNodeProtocol, tuple[int, ...]]] = [(root, ())]
    while stack:
        node, path = stack.pop()
        node_count += 1
        max_depth = max(max_depth, len(path))

        if node.type == TEXT_NODE_TYPE:
            text_node: TextNodeProtocol = node  # type: ignore[assignment]
            logger.debug("Found text node {!r} at path {}", text_node.name, list(path))
            items.append(
                LeafItem(
                    path=path,
                    content=text_node.characters,
                    name=text_node.name or None,
                    attributes=_leaf_attributes(text_node),
                )
            )
            nodes.append(text_node)
            layer_names.append(text_node.name)

        children = getattr(node, "children", None)
        if children:
            for i in range(len(children) - 1, -1, -1):
                stack.append((children[i], (*path, i)))

    structure = DocumentStructure(
        node_count=node_count,
        text_node_count=len(items),
        max_depth=max_depth,
        layer_names=tuple(layer_names),
    )
    logger.info(
        "Indexed {} text nodes out of {} total nodes (max depth {})",
        len(items), node_count, max_depth,
    )
    return IndexResult(
        snapshot=DocumentSnapshot(items=tuple(items), structure=structure),
        nodes=tuple(nodes),
    )
