"""Domain models."""

from frametext.models.leaf import (
    CopyPayload,
    DocumentSnapshot,
    DocumentStructure,
    FontName,
    LeafAttributes,
    LeafItem,
)
from frametext.models.transfer import (
    Assignment,
    Candidate,
    SkipReason,
    TransferDetail,
    TransferReport,
)

__all__ = [
    "Assignment",
    "Candidate",
    "CopyPayload",
    "DocumentSnapshot",
    "DocumentStructure",
    "FontName",
    "LeafAttributes",
    "LeafItem",
    "SkipReason",
    "TransferDetail",
    "TransferReport",
]
