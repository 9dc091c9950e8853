"""Content block types embedded in transcript messages."""
from __future__ import annotations

import json
import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class TextBlock(BaseModel):
    """Plain text content in a message."""

    model_config = ConfigDict(extra="allow")  # Preserve unknown fields

    type: Literal["text"] = "text"
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value


class ThinkingBlock(BaseModel):
    """Claude's extended thinking. Never rendered."""

    model_config = ConfigDict(extra="allow")

    type: Literal["thinking"] = "thinking"
    thinking: str = ""
    signature: str = ""


class ToolUseBlock(BaseModel):
    """Claude invoking a tool."""

    model_config = ConfigDict(extra="allow")

    type: Literal["tool_use"] = "tool_use"
    id: str = ""
    name: str = ""
    input: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "name", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("input", mode="before")
    @classmethod
    def _null_input(cls, value: Any) -> Any:
        return {} if value is None else value


class ToolResultBlock(BaseModel):
    """Result of a tool execution, correlated to a ToolUseBlock by tool_use_id."""

    model_config = ConfigDict(extra="allow")

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str = ""
    content: Any = ""  # Can be string or structured content
    is_error: bool = False

    @field_validator("tool_use_id", mode="before")
    @classmethod
    def _null_id(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("is_error", mode="before")
    @classmethod
    def _null_is_error(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def text(self) -> str:
        """Result content coerced to text.

        Lists of ``{"type": "text"}`` items are joined with newlines; any
        other structured value is serialized as compact JSON.
        """
        content = self.content
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list) and all(
            isinstance(item, dict) and item.get("type") == "text" for item in content
        ):
            return "\n".join(str(item.get("text", "")) for item in content)
        return json.dumps(content, separators=(",", ":"), ensure_ascii=False)


# Union type for all content blocks
ContentBlock = TextBlock | ThinkingBlock | ToolUseBlock | ToolResultBlock

_BLOCK_TYPES: dict[str, type[BaseModel]] = {
    "text": TextBlock,
    "thinking": ThinkingBlock,
    "tool_use": ToolUseBlock,
    "tool_result": ToolResultBlock,
}


def parse_content_block(data: Any) -> ContentBlock | None:
    """Parse a content block from raw dict based on type.

    Returns None for unknown block types and for payloads that fail
    validation, so newer log formats degrade instead of failing.
    """
    if not isinstance(data, dict):
        return None

    model = _BLOCK_TYPES.get(data.get("type", ""))
    if model is None:
        return None

    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except ValidationError as e:
        logger.debug("Dropping invalid %s block: %s", data.get("type"), e)
        return None


def parse_content_blocks(items: list[Any]) -> list[ContentBlock]:
    """Parse a list of raw blocks, skipping the ones parse_content_block drops."""
    blocks = []
    for item in items:
        block = parse_content_block(item)
        if block is not None:
            blocks.append(block)
    return blocks
