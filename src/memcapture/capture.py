"""Incremental capture of a transcript into a turn-delimited text block."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from memcapture.cursor import CaptureCursor
from memcapture.events import CaptureEvent
from memcapture.formatter import MessageFormatter
from memcapture.logging import CaptureLogger
from memcapture.selection import select_new_entries
from memcapture.settings import CaptureContext
from memcapture.transcript.core import parse_transcript

logger = logging.getLogger(__name__)

# Shorter output is left for the next pass to pick up
MIN_CAPTURE_LENGTH = 100

TURN_START = "<|turn_start|>"
TURN_END = "<|turn_end|>"


def _now_iso() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class TranscriptCapture:
    """Runs capture passes against a cursor store.

    Each call to format_new_entries is independent: the formatter and
    its tool index are created per call.
    """

    def __init__(
        self,
        cursor: CaptureCursor | None = None,
        event_logger: CaptureLogger | None = None,
    ) -> None:
        self.cursor = cursor if cursor is not None else CaptureCursor()
        self.event_logger = event_logger

    def format_new_entries(
        self,
        transcript_path: str | Path,
        session_id: str,
        context: CaptureContext,
    ) -> str | None:
        """Render entries added since the last capture of ``session_id``.

        Returns None when there is nothing new or the rendered block is
        shorter than MIN_CAPTURE_LENGTH; the cursor only advances when
        text is returned.
        """
        formatter = MessageFormatter(context.include_tools)

        entries = parse_transcript(transcript_path)
        if not entries:
            return None

        last_uuid = self.cursor.get(session_id)
        new_entries = select_new_entries(entries, last_uuid)

        if not new_entries:
            stale = bool(last_uuid) and all(e.uuid != last_uuid for e in entries)
            if stale:
                logger.warning(
                    "Cursor %s for session %s not found in %s",
                    last_uuid, session_id, transcript_path,
                )
            self._record(
                transcript_path, session_id, "skipped",
                "stale cursor" if stale else "no new entries", last_uuid,
            )
            return None

        first_entry = new_entries[0]
        last_entry = new_entries[-1]
        timestamp = first_entry.timestamp or _now_iso()

        parts = [f"{TURN_START}{timestamp}"]
        for entry in new_entries:
            lines = formatter.format_entry(entry)
            if lines:
                parts.append("\n".join(lines))
        parts.append(TURN_END)

        result = "\n\n".join(parts)

        if len(result) < MIN_CAPTURE_LENGTH:
            logger.debug(
                "Capture for session %s below minimum (%d chars)", session_id, len(result)
            )
            self._record(
                transcript_path, session_id, "skipped", "below minimum length",
                last_uuid, entries_selected=len(new_entries), output_chars=len(result),
            )
            return None

        if last_entry.uuid:
            self.cursor.set(session_id, last_entry.uuid)
        else:
            logger.warning("Last captured entry has no uuid; cursor not advanced")

        logger.info(
            "Captured %d entries (%d chars) for session %s",
            len(new_entries), len(result), session_id,
        )
        self._record(
            transcript_path, session_id, "captured", None, last_uuid,
            entries_selected=len(new_entries), output_chars=len(result),
            cursor=last_entry.uuid or last_uuid,
        )
        return result

    def _record(
        self,
        transcript_path: str | Path,
        session_id: str,
        event_type: str,
        reason: str | None,
        previous_cursor: str | None,
        entries_selected: int = 0,
        output_chars: int = 0,
        cursor: str | None = None,
    ) -> None:
        if self.event_logger is None:
            return
        try:
            self.event_logger.log(
                CaptureEvent(
                    session_id=session_id,
                    transcript_path=str(transcript_path),
                    event_type=event_type,  # type: ignore[arg-type]
                    reason=reason,
                    entries_selected=entries_selected,
                    output_chars=output_chars,
                    previous_cursor=previous_cursor,
                    cursor=cursor if cursor is not None else previous_cursor,
                )
            )
        except OSError as e:
            # Event log failures never cost the capture
            logger.warning("Failed to write capture event log: %s", e)


def format_new_entries(
    transcript_path: str | Path,
    session_id: str,
    context: CaptureContext,
) -> str | None:
    """One capture pass with the default cursor store.

    The capture event log is written when ``context.log_dir`` is set.
    """
    event_logger = CaptureLogger(context.log_dir) if context.log_dir else None
    return TranscriptCapture(event_logger=event_logger).format_new_entries(
        transcript_path, session_id, context
    )
