"""Transcript entry types."""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from memcapture.transcript.blocks import (
    ContentBlock,
    TextBlock,
    ToolResultBlock,
    parse_content_blocks,
)

# Entry types that carry conversation content
MESSAGE_TYPES = frozenset({"user", "assistant"})


def _raw_content(data: dict[str, Any]) -> Any:
    message = data.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")


class Entry(BaseModel):
    """Base class for all transcript entries.

    Only the fields capture reads are typed. Everything else in the record
    (``parentUuid``, ``sessionId``, ``requestId``, ...) rides along in the
    model extras, so an odd value there never costs the entry.

    Entries of unknown type decode to this class and are carried along
    so that their uuid can still be matched as a capture cursor.
    """

    model_config = ConfigDict(
        extra="allow",  # Preserve unknown fields
        populate_by_name=True,
    )

    type: str = ""
    uuid: str | None = None
    # Kept verbatim: it is echoed into the turn marker unchanged
    timestamp: str | None = None

    @property
    def is_message(self) -> bool:
        """Whether this entry is a user or assistant message."""
        return self.type in MESSAGE_TYPES


class UserMessage(Entry):
    """User's input to Claude, or tool results sent back on the user's behalf."""

    type: Literal["user"] = "user"

    _content: str | list[ContentBlock] = ""

    @property
    def content(self) -> str | list[ContentBlock]:
        """Raw string, or text and tool_result blocks."""
        return self._content

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> UserMessage:
        """Parse from raw transcript dict, handling nested message.content."""
        raw_content = _raw_content(data)

        content: str | list[ContentBlock]
        if isinstance(raw_content, str):
            content = raw_content
        elif isinstance(raw_content, list):
            # Users only send text and tool results
            content = [
                b
                for b in parse_content_blocks(raw_content)
                if isinstance(b, (TextBlock, ToolResultBlock))
            ]
        else:
            content = ""

        instance = cls.model_validate(data)
        instance._content = content
        return instance


class AssistantMessage(Entry):
    """Claude's response."""

    type: Literal["assistant"] = "assistant"

    _content: list[ContentBlock] = []

    @property
    def content(self) -> list[ContentBlock]:
        """Content blocks in this message."""
        return self._content

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> AssistantMessage:
        """Parse from raw transcript dict, handling nested message object."""
        raw_content = _raw_content(data)

        content: list[ContentBlock] = []
        if isinstance(raw_content, list):
            content = parse_content_blocks(raw_content)

        instance = cls.model_validate(data)
        instance._content = content
        return instance


# Type alias for all entry types
TranscriptEntry = UserMessage | AssistantMessage | Entry


def parse_entry(data: dict[str, Any]) -> TranscriptEntry:
    """Parse an entry from raw dict based on type.

    Raises pydantic.ValidationError when a typed field (``uuid``,
    ``timestamp``) has the wrong shape.
    """
    entry_type = data.get("type", "")

    if entry_type == "user":
        return UserMessage.from_raw(data)
    elif entry_type == "assistant":
        return AssistantMessage.from_raw(data)
    else:
        # Unknown type - return base Entry
        return Entry.model_validate(data)
