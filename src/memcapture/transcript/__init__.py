"""Transcript parsing: JSONL lines to typed entries and content blocks."""
from memcapture.transcript.blocks import (
    ContentBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    parse_content_block,
)
from memcapture.transcript.core import Transcript, parse_lines, parse_transcript
from memcapture.transcript.entries import (
    AssistantMessage,
    Entry,
    TranscriptEntry,
    UserMessage,
    parse_entry,
)

__all__ = [
    # Core
    "Transcript",
    "parse_lines",
    "parse_transcript",
    # Blocks
    "ContentBlock",
    "TextBlock",
    "ThinkingBlock",
    "ToolResultBlock",
    "ToolUseBlock",
    "parse_content_block",
    # Entries
    "Entry",
    "UserMessage",
    "AssistantMessage",
    "TranscriptEntry",
    "parse_entry",
]
