"""Copy text between frames of hierarchical scene documents."""

from frametext.core.apply.applier import apply_assignment
from frametext.core.match.matcher import match_snapshots
from frametext.core.tree.indexer import index_text_nodes
from frametext.protocols import PayloadStore, ProgressSink, ResourceLoader, SelectionProvider
from frametext.session import TransferSession

__all__ = [
    "PayloadStore",
    "ProgressSink",
    "ResourceLoader",
    "SelectionProvider",
    "TransferSession",
    "apply_assignment",
    "index_text_nodes",
    "match_snapshots",
]
