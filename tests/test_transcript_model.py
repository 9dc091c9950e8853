"""Tests for transcript parsing (memcapture.transcript)."""
import json

import pytest
from pydantic import ValidationError

from memcapture.transcript import (
    AssistantMessage,
    Entry,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    Transcript,
    UserMessage,
    parse_content_block,
    parse_entry,
    parse_lines,
    parse_transcript,
)

from factories import assistant_entry, text, tool_result, tool_use, user_entry


class TestContentBlocks:
    """Test content block parsing."""

    def test_text_block(self):
        block = parse_content_block({"type": "text", "text": "Hello world"})
        assert isinstance(block, TextBlock)
        assert block.text == "Hello world"
        assert block.type == "text"

    def test_tool_use_block(self):
        data = {
            "type": "tool_use",
            "id": "toolu_123",
            "name": "Bash",
            "input": {"command": "ls -la", "timeout": 30},
        }
        block = parse_content_block(data)
        assert isinstance(block, ToolUseBlock)
        assert block.id == "toolu_123"
        assert block.name == "Bash"
        assert list(block.input) == ["command", "timeout"]

    def test_tool_result_block(self):
        block = parse_content_block(tool_result("toolu_123", "file1.txt\nfile2.txt"))
        assert isinstance(block, ToolResultBlock)
        assert block.tool_use_id == "toolu_123"
        assert block.text == "file1.txt\nfile2.txt"
        assert block.is_error is False

    def test_tool_result_error(self):
        block = parse_content_block(tool_result("toolu_456", "Error: not found", is_error=True))
        assert block.is_error is True

    def test_thinking_block(self):
        data = {"type": "thinking", "thinking": "Let me consider...", "signature": "abc"}
        block = parse_content_block(data)
        assert isinstance(block, ThinkingBlock)
        assert block.thinking == "Let me consider..."

    def test_unknown_block_type_dropped(self):
        """Unknown types are ignored rather than rendered."""
        assert parse_content_block({"type": "image", "source": {}}) is None

    def test_invalid_block_dropped(self):
        """A block whose fields have the wrong shape is ignored."""
        assert parse_content_block({"type": "tool_use", "id": "t1", "input": "ls"}) is None
        assert parse_content_block("not a block") is None

    def test_null_fields_take_defaults(self):
        """JSON nulls in optional fields do not cost the block."""
        block = parse_content_block({"type": "tool_use", "id": None, "name": None, "input": None})
        assert isinstance(block, ToolUseBlock)
        assert (block.id, block.name, block.input) == ("", "", {})

        result = parse_content_block({"type": "tool_result", "tool_use_id": "t1", "is_error": None})
        assert result.is_error is False

    def test_extra_fields_preserved(self):
        block = parse_content_block({"type": "text", "text": "Hi", "citations": []})
        assert block.model_extra.get("citations") == []


class TestToolResultText:
    """Test coercion of structured tool result content."""

    def test_text_items_joined(self):
        block = ToolResultBlock(
            tool_use_id="t1",
            content=[{"type": "text", "text": "line one"}, {"type": "text", "text": "line two"}],
        )
        assert block.text == "line one\nline two"

    def test_other_structures_serialized(self):
        block = ToolResultBlock(tool_use_id="t1", content={"stdout": "ok", "code": 0})
        assert block.text == '{"stdout":"ok","code":0}'

    def test_none_content(self):
        assert ToolResultBlock(tool_use_id="t1", content=None).text == ""


class TestEntries:
    """Test entry parsing."""

    def test_user_message_text(self):
        data = user_entry("abc-123", "Hello Claude", parentUuid="parent-456", sessionId="s-789")
        entry = parse_entry(data)
        assert isinstance(entry, UserMessage)
        assert entry.uuid == "abc-123"
        assert entry.content == "Hello Claude"
        assert entry.model_extra["sessionId"] == "s-789"

    def test_timestamp_kept_verbatim(self):
        entry = parse_entry(user_entry("u1", "Hi", timestamp="2026-01-02T10:30:00.123Z"))
        assert entry.timestamp == "2026-01-02T10:30:00.123Z"

    def test_user_message_blocks(self):
        data = user_entry("u1", [text("see below"), tool_result("t1", "output here")])
        entry = parse_entry(data)
        assert isinstance(entry, UserMessage)
        assert isinstance(entry.content[0], TextBlock)
        assert isinstance(entry.content[1], ToolResultBlock)

    def test_user_message_ignores_assistant_blocks(self):
        data = user_entry("u1", [tool_use("t1", "Bash"), text("hi")])
        entry = parse_entry(data)
        assert len(entry.content) == 1
        assert isinstance(entry.content[0], TextBlock)

    def test_assistant_message(self):
        data = assistant_entry(
            "a1",
            [
                {"type": "thinking", "thinking": "Let me think...", "signature": ""},
                text("Here's the output"),
                tool_use("toolu_abc", "Bash", command="ls"),
            ],
            requestId="req-456",
        )
        entry = parse_entry(data)
        assert isinstance(entry, AssistantMessage)
        assert [type(b) for b in entry.content] == [ThinkingBlock, TextBlock, ToolUseBlock]
        assert entry.content[1].text == "Here's the output"

    def test_assistant_string_content(self):
        """Assistant content that is not a block list carries no blocks."""
        entry = parse_entry(assistant_entry("a1", "plain"))
        assert entry.content == []

    def test_missing_message(self):
        entry = parse_entry({"type": "user", "uuid": "u1"})
        assert isinstance(entry, UserMessage)
        assert entry.content == ""

    def test_odd_metadata_does_not_cost_the_entry(self):
        """Untyped record fields keep whatever shape the writer gave them."""
        entry = parse_entry(
            assistant_entry(
                "a1",
                [text("still here")],
                requestId=None,
                isSidechain="yes",
                parentUuid=["p1"],
                sessionId=None,
                cwd=None,
            )
        )
        assert isinstance(entry, AssistantMessage)
        assert entry.uuid == "a1"
        assert entry.content[0].text == "still here"
        assert entry.model_extra["isSidechain"] == "yes"

    def test_unknown_entry_type(self):
        entry = parse_entry({"type": "file-history-snapshot", "messageId": "m1"})
        assert type(entry) is Entry
        assert entry.is_message is False

    def test_invalid_fields_raise(self):
        with pytest.raises(ValidationError):
            parse_entry({"type": "user", "uuid": ["not", "a", "string"]})


class TestParseLines:
    """Test line-by-line decoding."""

    def test_skips_blank_and_malformed_lines(self):
        lines = [
            json.dumps(user_entry("u1", "one")),
            "",
            '{"type": "user", "uuid": "u2", "mess',
            "[1, 2, 3]",
            json.dumps({"type": "user", "uuid": 42}),
            json.dumps(assistant_entry("a1", [text("two")])),
        ]
        entries = parse_lines(lines)
        assert [e.uuid for e in entries] == ["u1", "a1"]

    def test_malformed_metadata_kept(self):
        lines = [
            json.dumps(user_entry("u1", "one", isSidechain={"nested": True})),
            json.dumps(assistant_entry("a1", [text("two")], requestId=7)),
        ]
        assert [e.uuid for e in parse_lines(lines)] == ["u1", "a1"]


class TestTranscriptLoading:
    """Test loading transcripts from disk."""

    def test_nonexistent_file(self, tmp_path):
        t = Transcript(tmp_path / "nonexistent.jsonl")
        t.load()
        assert len(t) == 0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.jsonl"
        path.write_text("")
        assert parse_transcript(path) == []

    def test_partial_last_line(self, write_transcript):
        """A half-written trailing line does not spoil the rest of the file."""
        path = write_transcript([
            user_entry("u1", "Hello"),
            assistant_entry("a1", [text("Hi")]),
            '{"type": "assistant", "uuid": "a2", "message": {"content": [{"type": "te',
        ])
        assert [e.uuid for e in parse_transcript(path)] == ["u1", "a1"]

    def test_iteration_keeps_file_order(self, write_transcript):
        path = write_transcript([
            {"type": "summary", "uuid": "s1"},
            user_entry("u1", "Hello"),
            assistant_entry("a1", [text("Hi")]),
        ])
        t = Transcript(path)
        t.load()

        assert len(t) == 3
        assert [e.uuid for e in t] == ["s1", "u1", "a1"]
        assert [e.is_message for e in t] == [False, True, True]

    def test_invalid_utf8_tolerated(self, tmp_path):
        path = tmp_path / "bad.jsonl"
        good = json.dumps(user_entry("u1", "Hello")).encode()
        path.write_bytes(b"\xff\xfe garbage\n" + good + b"\n")
        assert [e.uuid for e in parse_transcript(path)] == ["u1"]
