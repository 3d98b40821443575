"""Exception types for frametext operations.

Fatal errors (selection, missing payload) propagate to the caller with a
human-readable message. Per-leaf problems never raise out of a transfer;
they are collected in the transfer report instead.
"""


class FrameTextError(Exception):
    """Base class for all frametext errors."""


class SelectionError(FrameTextError):
    """The current selection cannot be used for a copy or paste."""


class NoSelectionError(SelectionError):
    """Nothing is selected."""


class MultipleSelectionError(SelectionError):
    """More than one node is selected."""


class WrongSelectionKindError(SelectionError):
    """The selected node is not a frame."""


class NoPayloadError(FrameTextError):
    """Paste was requested before any successful copy."""


class PersistenceError(FrameTextError):
    """The payload store could not be read or written."""


class FontLoadError(FrameTextError):
    """A font could not be made available for writing."""

    def __init__(self, message: str, *, family: str | None = None, style: str | None = None) -> None:
        super().__init__(message)
        self.family = family
        self.style = style


class FontNotLoadedError(FrameTextError):
    """Text was written to a node whose font has not been loaded."""
