"""Copy, paste and clear operations over a retained text payload."""

import time
from dataclasses import dataclass
from typing import Any

from loguru import logger

from frametext.config import PAYLOAD_KEY
from frametext.core.apply.applier import apply_assignment
from frametext.core.match.matcher import match_snapshots
from frametext.core.match.signals import DEFAULT_SIGNALS, Signal
from frametext.core.tree.indexer import index_text_nodes
from frametext.core.tree.selection import selected_frame
from frametext.errors import FrameTextError, NoPayloadError
from frametext.models.leaf import CopyPayload, DocumentStructure
from frametext.models.transfer import TransferReport
from frametext.protocols import PayloadStore, ProgressSink, ResourceLoader, SelectionProvider

COMMANDS = ("COPY", "PASTE", "CLEAR")


@dataclass(frozen=True)
class CopyResult:
    """Outcome of a copy."""

    frame_name: str
    text_node_count: int
    structure: DocumentStructure
    stored: bool
    caveat: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": "COPY_SUCCESS",
            "frameName": self.frame_name,
            "textNodeCount": self.text_node_count,
            "structure": self.structure.to_dict(),
            "stored": self.stored,
        }
        if self.caveat:
            data["caveat"] = self.caveat
        return data


@dataclass(frozen=True)
class PasteResult:
    """Outcome of a paste: which frames were involved and the transfer report."""

    frame_name: str
    source_frame_name: str
    report: TransferReport

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "PASTE_SUCCESS",
            "frameName": self.frame_name,
            "sourceFrameName": self.source_frame_name,
            **self.report.to_dict(),
        }


@dataclass(frozen=True)
class ClearResult:
    """Outcome of a clear."""

    stored_cleared: bool
    caveat: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": "CLEAR_SUCCESS", "storedCleared": self.stored_cleared}
        if self.caveat:
            data["caveat"] = self.caveat
        return data


class LoggingProgressSink:
    """Progress sink that writes everything to the log."""

    def progress(self, percent: int) -> None:
        logger.debug("Progress: {}%", percent)

    def success(self, summary: dict[str, Any]) -> None:
        logger.info("{}: {}", summary.get("type", "SUCCESS"), _summary_line(summary))

    def error(self, message: str) -> None:
        logger.error(message)


def _summary_line(summary: dict[str, Any]) -> str:
    if "mapped" in summary:
        return f"{summary['mapped']} mapped, {summary['skipped']} skipped of {summary['total']}"
    if "textNodeCount" in summary:
        return f"{summary['textNodeCount']} text nodes from {summary['frameName']!r}"
    return "done"


class _SafeSink:
    """Forward to a sink, logging instead of raising when the sink fails."""

    def __init__(self, sink: ProgressSink | None) -> None:
        self._sink = sink

    def _call(self, method: str, arg: Any) -> None:
        if self._sink is None:
            return
        try:
            getattr(self._sink, method)(arg)
        except Exception:
            logger.opt(exception=True).warning("Progress sink failed in {}()", method)

    def progress(self, percent: int) -> None:
        self._call("progress", percent)

    def success(self, summary: dict[str, Any]) -> None:
        self._call("success", summary)

    def error(self, message: str) -> None:
        self._call("error", message)


class TransferSession:
    """Owns the last copied payload and runs copy/paste/clear against it.

    The payload lives in memory for the session and is mirrored to the
    payload store, so a paste still works when the store is unavailable
    and a later session can paste what an earlier one copied.
    """

    def __init__(
        self,
        store: PayloadStore | None,
        *,
        sink: ProgressSink | None = None,
        payload_key: str = PAYLOAD_KEY,
        signals: tuple[Signal, ...] = DEFAULT_SIGNALS,
    ) -> None:
        self.store = store
        self.sink = _SafeSink(sink)
        self.payload_key = payload_key
        self.signals = signals
        self.last_payload: CopyPayload | None = None

    async def copy(self, selection: SelectionProvider) -> CopyResult:
        """Capture the text of the selected frame."""
        frame = selected_frame(selection)
        logger.info("Copying text from frame {!r}", frame.name)
        snapshot = index_text_nodes(frame).snapshot

        payload = CopyPayload(
            source_frame_id=frame.id,
            source_frame_name=frame.name,
            captured_at=int(time.time() * 1000),
            snapshot=snapshot,
        )
        self.last_payload = payload

        stored, caveat = True, None
        if self.store is None:
            stored, caveat = False, "No payload store configured; copy kept for this session only."
        else:
            try:
                await self.store.put(self.payload_key, payload.to_dict())
            except Exception as e:
                logger.warning("Could not persist copy payload: {}", e)
                stored = False
                caveat = f"Copy kept for this session only; payload store failed: {e}"

        result = CopyResult(
            frame_name=frame.name,
            text_node_count=len(snapshot),
            structure=snapshot.structure,
            stored=stored,
            caveat=caveat,
        )
        self.sink.success(result.to_dict())
        return result

    async def load_payload(self) -> CopyPayload | None:
        """Return the in-memory payload, else the stored one, else None."""
        if self.last_payload is not None:
            return self.last_payload
        if self.store is None:
            return None

        logger.debug("No in-memory payload, checking store")
        try:
            data = await self.store.get(self.payload_key)
        except Exception as e:
            logger.warning("Could not read copy payload from store: {}", e)
            return None
        if data is None:
            return None
        try:
            return CopyPayload.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable stored payload: {!r}", e)
            return None

    async def paste(self, selection: SelectionProvider, loader: ResourceLoader) -> PasteResult:
        """Write the copied text into the selected frame's text nodes."""
        frame = selected_frame(selection)
        logger.info("Pasting text into frame {!r}", frame.name)

        payload = await self.load_payload()
        if payload is None:
            msg = "No text copied. Please copy text from a frame first."
            raise NoPayloadError(msg)
        logger.debug("Found payload with {} text items", len(payload.items))

        target = index_text_nodes(frame)
        assignment = match_snapshots(payload.snapshot, target.snapshot, self.signals)
        report = await apply_assignment(
            payload.items,
            assignment,
            target.nodes,
            loader=loader,
            on_progress=self.sink.progress,
        )

        result = PasteResult(
            frame_name=frame.name,
            source_frame_name=payload.source_frame_name,
            report=report,
        )
        self.sink.success(result.to_dict())
        return result

    async def clear(self) -> ClearResult:
        """Forget the copied payload, in memory and in the store."""
        self.last_payload = None
        if self.store is None:
            result = ClearResult(stored_cleared=False, caveat="No payload store configured.")
        else:
            try:
                await self.store.clear(self.payload_key)
            except Exception as e:
                logger.warning("Could not clear stored copy payload: {}", e)
                result = ClearResult(stored_cleared=False, caveat=f"Payload store failed: {e}")
            else:
                result = ClearResult(stored_cleared=True)
        logger.info("Copy data cleared")
        self.sink.success(result.to_dict())
        return result

    async def status(self) -> dict[str, Any] | None:
        """Describe the payload a paste would use, or None if there is none."""
        payload = await self.load_payload()
        if payload is None:
            return None
        return {
            "sourceFrameId": payload.source_frame_id,
            "sourceFrameName": payload.source_frame_name,
            "capturedAt": payload.captured_at,
            "textNodeCount": len(payload.items),
            "inMemory": payload is self.last_payload,
        }

    async def dispatch(
        self,
        command: str,
        selection: SelectionProvider | None = None,
        loader: ResourceLoader | None = None,
    ) -> CopyResult | PasteResult | ClearResult:
        """Run a COPY, PASTE or CLEAR message.

        Fatal errors are reported to the sink and then re-raised.
        """
        command = command.upper()
        if command not in COMMANDS:
            msg = f"Unknown command: {command!r}"
            raise ValueError(msg)
        try:
            if command == "CLEAR":
                return await self.clear()
            if selection is None:
                msg = f"{command} needs a selection"
                raise ValueError(msg)
            if command == "COPY":
                return await self.copy(selection)
            if loader is None:
                msg = "PASTE needs a font loader"
                raise ValueError(msg)
            return await self.paste(selection, loader)
        except (FrameTextError, ValueError) as e:
            logger.error("{} failed: {}", command, e)
            self.sink.error(str(e))
            raise


__all__ = [
    "ClearResult",
    "CopyResult",
    "LoggingProgressSink",
    "PasteResult",
    "TransferSession",
]
