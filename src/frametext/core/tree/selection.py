"""Selection validation for copy and paste."""

from collections.abc import Sequence

from loguru import logger

from frametext.errors import MultipleSelectionError, NoSelectionError, WrongSelectionKindError
from frametext.protocols import SelectionProvider, TreeNodeProtocol

FRAME_NODE_TYPE = "FRAME"


def validate_single_frame(selection: Sequence[TreeNodeProtocol]) -> TreeNodeProtocol:
    """Return the one selected frame, or raise a SelectionError explaining why not."""
    logger.debug("Validating selection of {} node(s)", len(selection))
    if not selection:
        msg = "Please select a frame to work with"
        raise NoSelectionError(msg)
    if len(selection) > 1:
        msg = "Please select only one frame at a time"
        raise MultipleSelectionError(msg)

    node = selection[0]
    if node.type != FRAME_NODE_TYPE:
        msg = "Selected item must be a Frame. Please select a frame and try again."
        raise WrongSelectionKindError(msg)
    return node


def selected_frame(provider: SelectionProvider) -> TreeNodeProtocol:
    """Fetch the selection from a provider and validate it."""
    return validate_single_frame(provider.get_selection())
