"""Render transcript entries as role-tagged message lines.

Each rendered line has the form::

    <|start|>ROLE<|message|>CONTENT<|end|>

with ROLE one of ``user``, ``assistant``, ``assistant:tool`` and
``assistant:tool_result``. Tools outside the inclusion list are reduced
to a one-line mention and their results are dropped.
"""
from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from memcapture.redact import (
    MAX_TOOL_INPUT_LENGTH,
    MAX_TOOL_RESULT_LENGTH,
    clean_content,
    truncate,
)
from memcapture.settings import should_include_tool
from memcapture.transcript.blocks import (
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from memcapture.transcript.entries import (
    AssistantMessage,
    TranscriptEntry,
    UserMessage,
)

UNKNOWN_TOOL = "Unknown"

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_TOOL = "assistant:tool"
ROLE_TOOL_RESULT = "assistant:tool_result"


def render_message(role: str, content: str) -> str:
    return f"<|start|>{role}<|message|>{content}<|end|>"


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    # Compact form, matching what the transcript writer produced
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def format_tool_input(tool_input: dict[str, Any]) -> str:
    """Render tool arguments as ``key="value"`` pairs in input order."""
    parts = []
    for key, value in tool_input.items():
        value_str = truncate(_stringify(value), MAX_TOOL_INPUT_LENGTH)
        parts.append(f'{key}="{value_str}"')
    return " ".join(parts)


class ToolUseIndex:
    """Maps tool_use ids to tool names for the duration of one run.

    Tool results only carry the id of the call they answer, so names are
    recorded as assistant messages are formatted.
    """

    def __init__(self) -> None:
        self._names: dict[str, str] = {}

    def register(self, tool_use_id: str, name: str) -> None:
        if tool_use_id:
            self._names[tool_use_id] = name

    def name_for(self, tool_use_id: str) -> str:
        return self._names.get(tool_use_id, UNKNOWN_TOOL)

    def __contains__(self, tool_use_id: object) -> bool:
        return tool_use_id in self._names

    def __len__(self) -> int:
        return len(self._names)


class MessageFormatter:
    """Formats entries in file order; one instance per capture run."""

    def __init__(
        self,
        include_tools: Iterable[str],
        tool_index: ToolUseIndex | None = None,
    ) -> None:
        self.include_tools = list(include_tools)
        self.tool_index = tool_index if tool_index is not None else ToolUseIndex()

    def includes(self, tool_name: str) -> bool:
        return should_include_tool(tool_name, self.include_tools)

    def format_entry(self, entry: TranscriptEntry) -> list[str]:
        """Render one entry as zero or more tagged lines."""
        if isinstance(entry, UserMessage):
            return self.format_user(entry)
        if isinstance(entry, AssistantMessage):
            return self.format_assistant(entry)
        return []

    def format_user(self, entry: UserMessage) -> list[str]:
        content = entry.content
        if isinstance(content, str):
            cleaned = clean_content(content)
            return [render_message(ROLE_USER, cleaned)] if cleaned else []

        lines = []
        for block in content:
            if isinstance(block, TextBlock):
                cleaned = clean_content(block.text)
                if cleaned:
                    lines.append(render_message(ROLE_USER, cleaned))
            elif isinstance(block, ToolResultBlock):
                line = self._format_tool_result(block)
                if line:
                    lines.append(line)
        return lines

    def _format_tool_result(self, block: ToolResultBlock) -> str | None:
        tool_name = self.tool_index.name_for(block.tool_use_id)
        if not self.includes(tool_name):
            return None

        result = truncate(clean_content(block.text), MAX_TOOL_RESULT_LENGTH)
        if not result:
            return None
        status = "error" if block.is_error else "success"
        return render_message(ROLE_TOOL_RESULT, f"{tool_name}({status}): {result}")

    def format_assistant(self, entry: AssistantMessage) -> list[str]:
        lines = []
        # Mentions of excluded tools, merged into the next text line
        pending: list[str] = []

        for block in entry.content:
            if isinstance(block, ThinkingBlock):
                continue

            if isinstance(block, TextBlock):
                cleaned = clean_content(block.text)
                if cleaned:
                    if pending:
                        cleaned = " ".join(pending) + " " + cleaned
                        pending = []
                    lines.append(render_message(ROLE_ASSISTANT, cleaned))

            elif isinstance(block, ToolUseBlock):
                tool_name = block.name or UNKNOWN_TOOL
                self.tool_index.register(block.id, tool_name)

                if not self.includes(tool_name):
                    pending.append(f"Assistant uses {tool_name} tool.")
                    continue

                if pending:
                    lines.append(render_message(ROLE_ASSISTANT, " ".join(pending)))
                    pending = []
                lines.append(
                    render_message(ROLE_TOOL, f"{tool_name}: {format_tool_input(block.input)}")
                )

        if pending:
            lines.append(render_message(ROLE_ASSISTANT, " ".join(pending)))

        return lines
