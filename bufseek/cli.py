"""
CLI interface for bufseek.

Usage:
    bufseek recent
    bufseek record path/to/file.py
    bufseek search "query" src/*.py
    bufseek search --exact "TODO" notes.md
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .api import BufferSeeker
from .config import DATA_DIR_ENV, load_or_create_config
from .errors import log_exception
from .host import FileSystemHost
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .types import LINE_GROUP, MatchMode, MatchResult


# Configure quiet mode by default
# Set BUFSEEK_VERBOSE=1 to enable debug mode via environment
if os.environ.get("BUFSEEK_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"bufseek {version('bufseek')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False
_data_dir_override: Optional[Path] = None


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


def _data_dir_callback(value: Optional[Path]):
    global _data_dir_override
    _data_dir_override = value


def _get_data_dir() -> Optional[Path]:
    return _data_dir_override


app = typer.Typer(
    name="bufseek",
    help="Recent buffer history and multi-buffer search.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    json_output: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
        callback=_json_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    data_dir: Annotated[Optional[Path], typer.Option(
        "--data-dir", "-d",
        envvar=DATA_DIR_ENV,
        help="Directory holding the config and history cache (default: ~/.bufseek/)",
        callback=_data_dir_callback,
        is_eager=True,
    )] = None,
):
    """Recent buffer history and multi-buffer search."""


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _get_seeker(paths: Optional[list[Path]] = None) -> BufferSeeker:
    """Build a seeker over the given files, with history restored."""
    config = load_or_create_config(_get_data_dir())
    configure_ops_log(config.path)
    host = FileSystemHost.from_paths(paths or [])
    seeker = BufferSeeker(host, config)
    seeker.initialize()
    return seeker


def _render_marked(text: str, spans) -> str:
    """Wrap matched spans in brackets for terminal output."""
    out = []
    pos = 0
    for span in spans:
        if span.group == LINE_GROUP or span.start < pos:
            continue
        out.append(text[pos:span.start])
        out.append("[" + text[span.start:span.end] + "]")
        pos = span.end
    out.append(text[pos:])
    return "".join(out)


def _result_to_dict(result: MatchResult) -> dict:
    entry = result.entry
    return {
        "identity": entry.document_identity,
        "label": entry.display_label,
        "line": entry.line_number,
        "text": entry.text,
        "score": result.score,
        "spans": [list(s) for s in (result.highlight_spans or [])],
    }


def _fail(e: Exception, context: str) -> None:
    log_path = log_exception(e, context, data_dir=_get_data_dir())
    typer.echo(f"Error: {e}", err=True)
    typer.echo(f"Details logged to {log_path}", err=True)
    raise typer.Exit(1)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command("recent")
def recent(
    limit: Annotated[int, typer.Option(
        "--limit", "-n",
        help="Maximum entries to show (0 for all)"
    )] = 0,
):
    """
    List recently used buffers, most recent first.

    Each entry is shown with its status: 'file exists' if it can be
    reopened from disk, 'closed' otherwise.
    """
    try:
        seeker = _get_seeker()
        listings = seeker.list_recent()
    except Exception as e:
        _fail(e, "recent")
    if limit > 0:
        listings = listings[:limit]

    if _get_json_output():
        typer.echo(json.dumps([
            {**l.entry.to_record(), "status": l.status} for l in listings
        ], indent=2))
        return
    for listing in listings:
        typer.echo(f"{listing.display}  {listing.entry.identity}")


@app.command("record")
def record(
    paths: Annotated[list[Path], typer.Argument(
        help="Files to mark as accessed, in order"
    )],
):
    """
    Record file accesses in the history and save it.

    The last file given becomes the most recent entry.
    """
    try:
        seeker = _get_seeker()
        for path in paths:
            identity = str(path.expanduser().resolve())
            seeker.record_access(identity)
        saved = seeker.flush_to_store()
    except Exception as e:
        _fail(e, "record")
    if not saved:
        typer.echo(f"Warning: history not saved to {seeker.store.path}", err=True)
        raise typer.Exit(1)


@app.command("search")
def search(
    query: Annotated[str, typer.Argument(
        help="Text to search for"
    )],
    paths: Annotated[list[Path], typer.Argument(
        help="Files to search"
    )],
    exact: Annotated[bool, typer.Option(
        "--exact", "-e",
        help="Case-sensitive literal substring match (default: fuzzy)"
    )] = False,
    limit: Annotated[int, typer.Option(
        "--limit", "-n",
        help="Maximum results to return"
    )] = 20,
):
    """
    Search every non-blank line of the given files.

    \b
    Examples:
        bufseek search hndlr src/*.py      # fuzzy, best match first
        bufseek search -e "TODO(" *.md     # literal, file order
    """
    mode = MatchMode.EXACT if exact else MatchMode.FUZZY
    try:
        seeker = _get_seeker(paths)
        session = seeker.open_search(mode)
        results = session.filter(query)[:limit]
        for result in results:
            session.highlight(result)
    except Exception as e:
        _fail(e, "search")

    if _get_json_output():
        typer.echo(json.dumps([_result_to_dict(r) for r in results], indent=2))
        return
    if not results:
        typer.echo("No results.")
        return
    for result in results:
        entry = result.entry
        text = _render_marked(entry.text, result.highlight_spans or [])
        typer.echo(f"[{entry.display_label}:{entry.line_number}] {text}")


@app.command("config")
def show_config():
    """Show the configuration in effect."""
    try:
        config = load_or_create_config(_get_data_dir())
    except Exception as e:
        _fail(e, "config")
    data = {
        "config": str(config.config_path),
        "cache": str(config.cache_path),
        "max_entries": config.max_entries,
        "remote_schemes": list(config.remote_schemes),
        "keymaps": config.keymaps,
    }
    if _get_json_output():
        typer.echo(json.dumps(data, indent=2))
        return
    for key, value in data.items():
        typer.echo(f"{key}: {value}")


if __name__ == "__main__":
    app()
