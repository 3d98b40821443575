"""MCP server exposing frametext copy, paste and clear as tools."""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from frametext.config import resolve_data_directory
from frametext.core.store.payload_store import SqlitePayloadStore, try_open_payload_store
from frametext.errors import FrameTextError
from frametext.host.document import Document, DocumentSelection
from frametext.host.fonts import make_font_loader
from frametext.session import LoggingProgressSink, TransferSession


def _load_document(document: str) -> Document | dict[str, Any]:
    path = Path(document).expanduser()
    if not path.exists():
        return {"error": f"Document '{document}' not found."}
    try:
        return Document.load(path)
    except ValueError as e:
        return {"error": str(e)}


# --- Core functions (testable without MCP context) ---


async def frametext_copy(
    session: TransferSession,
    *,
    document: str,
    node_ids: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Copy the text of a frame in a scene document.

    Args:
        document: Path to the scene document (JSON).
        node_ids: Id of the frame to copy. Defaults to the document's selection.
    """
    doc = _load_document(document)
    if isinstance(doc, dict):
        return doc
    try:
        result = await session.copy(DocumentSelection(doc, node_ids))
    except FrameTextError as e:
        return {"error": str(e)}
    return result.to_dict()


async def frametext_paste(
    session: TransferSession,
    *,
    document: str,
    node_ids: Sequence[str] | None = None,
    font_dir: str | None = None,
    font_url: str | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Paste the copied text into a frame and save the document.

    Args:
        document: Path to the scene document (JSON).
        node_ids: Id of the target frame. Defaults to the document's selection.
        font_dir: Directory of font files to resolve fonts from.
        font_url: Base URL of a font server to resolve fonts from.
        dry_run: Match and report, but do not save the document.
    """
    doc = _load_document(document)
    if isinstance(doc, dict):
        return doc
    loader = make_font_loader(
        doc.fonts,
        font_dir=Path(font_dir).expanduser() if font_dir else None,
        font_url=font_url,
    )
    try:
        result = await session.paste(DocumentSelection(doc, node_ids), loader)
    except FrameTextError as e:
        return {"error": str(e)}
    if not dry_run:
        doc.save()
    output = result.to_dict()
    output["saved"] = not dry_run
    return output


async def frametext_clear(session: TransferSession) -> dict[str, Any]:
    """Forget the copied text."""
    result = await session.clear()
    return result.to_dict()


async def frametext_status(session: TransferSession) -> dict[str, Any]:
    """Describe the copied text a paste would use."""
    info = await session.status()
    if info is None:
        return {"copied": False}
    return {"copied": True, **info}


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    session: TransferSession
    store: SqlitePayloadStore | None
    data_dir: Path


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Open the payload store on startup, close on shutdown.

    When the store cannot be opened, the session keeps copies in memory.
    """
    data_dir = resolve_data_directory()
    store = try_open_payload_store(data_dir)
    if store is not None:
        logger.info("Payload store at {}", data_dir)
    try:
        session = TransferSession(store, sink=LoggingProgressSink())
        yield ServerContext(session=session, store=store, data_dir=data_dir)
    finally:
        if store is not None:
            store.close()


mcp_server = FastMCP(
    "frametext",
    instructions="""\
frametext copies the text of one frame in a scene document (JSON) into
another frame, matching text nodes by position, name, style and content.

1. Call frametext_copy_tool with the source document and frame id.
2. Call frametext_paste_tool with the target document and frame id.
3. Check "details" in the paste result for text nodes that were skipped.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def frametext_copy_tool(
    ctx: Context,
    document: str,
    node_id: str | None = None,
) -> dict[str, Any]:
    """Copy all text of a frame so it can be pasted into another frame.

    Args:
        document: Path to the scene document (JSON).
        node_id: Frame id. Defaults to the document's stored selection.
    """
    return await frametext_copy(
        _ctx(ctx).session, document=document, node_ids=[node_id] if node_id else None
    )


@mcp_server.tool()
async def frametext_paste_tool(
    ctx: Context,
    document: str,
    node_id: str | None = None,
    font_dir: str | None = None,
    font_url: str | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Paste the copied text into a frame, matching text nodes one to one.

    Args:
        document: Path to the scene document (JSON).
        node_id: Target frame id. Defaults to the document's stored selection.
        font_dir: Directory of font files for fonts used by the target.
        font_url: Base URL of a font server for fonts used by the target.
        dry_run: Report the matches without saving the document.
    """
    return await frametext_paste(
        _ctx(ctx).session,
        document=document,
        node_ids=[node_id] if node_id else None,
        font_dir=font_dir,
        font_url=font_url,
        dry_run=dry_run,
    )


@mcp_server.tool()
async def frametext_clear_tool(ctx: Context) -> dict[str, Any]:
    """Forget the copied text."""
    return await frametext_clear(_ctx(ctx).session)


@mcp_server.tool()
async def frametext_status_tool(ctx: Context) -> dict[str, Any]:
    """Show which frame's text is currently copied."""
    return await frametext_status(_ctx(ctx).session)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from frametext.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
