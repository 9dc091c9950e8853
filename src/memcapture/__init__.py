"""memcapture - incremental transcript capture for memory stores."""
__version__ = "0.1.0"

from memcapture.capture import MIN_CAPTURE_LENGTH, TranscriptCapture, format_new_entries
from memcapture.cursor import CaptureCursor
from memcapture.formatter import MessageFormatter, ToolUseIndex
from memcapture.redact import clean_content, truncate
from memcapture.selection import select_new_entries
from memcapture.settings import CaptureContext, CaptureSettings, load_settings
from memcapture.transcript import Transcript, parse_transcript

__all__ = [
    "MIN_CAPTURE_LENGTH",
    "CaptureContext",
    "CaptureCursor",
    "CaptureSettings",
    "MessageFormatter",
    "ToolUseIndex",
    "Transcript",
    "TranscriptCapture",
    "clean_content",
    "format_new_entries",
    "load_settings",
    "parse_transcript",
    "select_new_entries",
    "truncate",
]
