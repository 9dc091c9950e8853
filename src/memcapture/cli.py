"""memcapture command line: one capture pass per invocation."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from memcapture import __version__
from memcapture._internal.io import read_stdin, write_stdout
from memcapture.capture import TranscriptCapture
from memcapture.cursor import CaptureCursor
from memcapture.logging import CaptureLogger
from memcapture.settings import CaptureContext, SettingsError

app = typer.Typer(
    name="memcapture",
    help="Capture new transcript activity as a turn-delimited text block.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"memcapture {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output to stderr."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="[memcapture] %(levelname)s %(name)s: %(message)s",
    )


def _run_capture(transcript: Path, session_id: str, cwd: Path) -> None:
    try:
        context = CaptureContext.from_cwd(cwd)
        event_logger = CaptureLogger(context.log_dir) if context.log_dir else None
        result = TranscriptCapture(event_logger=event_logger).format_new_entries(
            transcript, session_id, context
        )
    except (OSError, SettingsError) as e:
        typer.echo(f"[memcapture] capture failed: {e}", err=True)
        raise typer.Exit(code=1)

    if result:
        write_stdout(result, sys.stdout)


@app.command()
def capture(
    transcript: Path = typer.Argument(..., help="Path to the JSONL transcript"),
    session_id: str = typer.Option(..., "--session-id", "-s", help="Session to capture"),
    cwd: Path = typer.Option(Path("."), "--cwd", help="Working directory for settings"),
) -> None:
    """Print entries added since the last capture of a session."""
    _run_capture(transcript, session_id, cwd)


@app.command()
def hook() -> None:
    """Capture from a Claude Code hook payload read on stdin."""
    data = read_stdin(sys.stdin)
    if not data:
        return

    session_id = data.get("session_id")
    transcript_path = data.get("transcript_path")
    if not session_id or not transcript_path:
        typer.echo("[memcapture] hook payload lacks session_id or transcript_path", err=True)
        return

    _run_capture(Path(transcript_path), str(session_id), Path(data.get("cwd") or "."))


@app.command()
def cursor(session_id: str = typer.Argument(..., help="Session id")) -> None:
    """Show the stored cursor for a session."""
    value = CaptureCursor().get(session_id)
    if value is None:
        typer.echo(f"No cursor for session {session_id}", err=True)
        raise typer.Exit(code=1)
    typer.echo(value)


@app.command()
def reset(session_id: str = typer.Argument(..., help="Session id")) -> None:
    """Forget the stored cursor so the next capture starts from the beginning."""
    if CaptureCursor().clear(session_id):
        typer.echo(f"Cleared cursor for session {session_id}")
    else:
        typer.echo(f"No cursor for session {session_id}")
