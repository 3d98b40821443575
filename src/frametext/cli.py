"""CLI for frametext: copy text out of one frame and paste it into another."""

import asyncio
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from frametext.config import resolve_data_directory
from frametext.core.store.payload_store import SqlitePayloadStore, try_open_payload_store
from frametext.errors import FrameTextError
from frametext.host.document import Document, DocumentSelection
from frametext.host.fonts import make_font_loader
from frametext.logging_config import configure_logging
from frametext.session import LoggingProgressSink, TransferSession

app = typer.Typer(help="frametext: copy text between frames of scene documents.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Directory holding the payload database"),
]
SelectOption = Annotated[
    list[str] | None,
    typer.Option("--select", "-s", help="Node id to select (default: the document's selection)"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Annotated[
        Path | None, typer.Option("--log-file", help="Also write a debug log to this file")
    ] = None,
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)


def _open_store(data_dir: Path | None) -> SqlitePayloadStore | None:
    return try_open_payload_store(data_dir or resolve_data_directory())


def _close_store(store: SqlitePayloadStore | None) -> None:
    if store is not None:
        store.close()


def _load_document(path: Path) -> Document:
    if not path.exists():
        logger.error("Document not found: {}", path)
        raise typer.Exit(1)
    try:
        return Document.load(path)
    except ValueError as e:
        logger.error("Cannot read document {}: {}", path, e)
        raise typer.Exit(1) from e


@app.command()
def copy(
    document: Path = typer.Argument(..., help="Scene document (JSON) to copy from"),
    select: SelectOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """Copy the text of the selected frame."""
    doc = _load_document(document)
    store = _open_store(data_dir)
    try:
        session = TransferSession(store, sink=LoggingProgressSink())
        result = asyncio.run(session.copy(DocumentSelection(doc, select)))
    except FrameTextError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    finally:
        _close_store(store)

    typer.echo(f"Copied {result.text_node_count} text nodes from {result.frame_name!r}")
    if result.caveat:
        typer.echo(f"Warning: {result.caveat}")


@app.command()
def paste(
    document: Path = typer.Argument(..., help="Scene document (JSON) to paste into"),
    select: SelectOption = None,
    font_dir: Annotated[
        Path | None, typer.Option("--font-dir", help="Directory of font files")
    ] = None,
    font_url: Annotated[
        str | None, typer.Option("--font-url", help="Base URL of a font server")
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the result here instead")
    ] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write the document"),
    details: bool = typer.Option(False, "--details", help="Show one line per text node"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    data_dir: DataDirOption = None,
) -> None:
    """Paste the copied text into the selected frame."""
    doc = _load_document(document)
    loader = make_font_loader(doc.fonts, font_dir=font_dir, font_url=font_url)
    store = _open_store(data_dir)
    try:
        session = TransferSession(store, sink=LoggingProgressSink())
        result = asyncio.run(session.paste(DocumentSelection(doc, select), loader))
    except FrameTextError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    finally:
        _close_store(store)

    if not dry_run:
        saved = doc.save(output)
        logger.debug("Wrote {}", saved)

    report = result.report
    if output_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return
    typer.echo(
        f"Pasted into {result.frame_name!r}: {report.transferred} mapped, "
        f"{report.skipped} skipped (of {report.total})"
    )
    if details:
        for detail in report.details:
            typer.echo(f"  [{detail.outcome}] {detail.message}")
            if detail.signals:
                breakdown = ", ".join(f"{name}={value:g}" for name, value in detail.signals.items())
                typer.echo(f"      {breakdown}")


@app.command()
def clear(data_dir: DataDirOption = None) -> None:
    """Forget the copied text."""
    store = _open_store(data_dir)
    try:
        result = asyncio.run(TransferSession(store).clear())
    finally:
        _close_store(store)
    typer.echo("Copy data cleared")
    if result.caveat:
        typer.echo(f"Warning: {result.caveat}")


@app.command()
def status(
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show what a paste would use."""
    store = _open_store(data_dir)
    try:
        info = asyncio.run(TransferSession(store).status())
    finally:
        _close_store(store)

    if output_json:
        typer.echo(json.dumps(info, indent=2))
        return
    if info is None:
        typer.echo("Nothing copied.")
        return
    captured = datetime.fromtimestamp(info["capturedAt"] / 1000, tz=UTC)
    typer.echo(f"{info['textNodeCount']} text nodes from {info['sourceFrameName']!r}")
    typer.echo(f"  copied {captured:%Y-%m-%d %H:%M}  frame id={info['sourceFrameId']}")


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from frametext.mcp.server import run_mcp_server

    run_mcp_server()
