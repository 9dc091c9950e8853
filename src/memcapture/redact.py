"""Redaction of injected context markers and length caps."""
from __future__ import annotations

import re
from typing import Any

MAX_TOOL_RESULT_LENGTH = 500
MAX_TOOL_INPUT_LENGTH = 100

TRUNCATION_MARKER = "..."

# Context injected by the host or by memcapture's own recall; never re-captured
_REDACTED_SPANS = (
    re.compile(r"<system-reminder>.*?</system-reminder>", re.DOTALL),
    re.compile(r"<supermemory-context>.*?</supermemory-context>", re.DOTALL),
)


def clean_content(text: Any) -> str:
    """Strip redacted spans and surrounding whitespace.

    Anything that is not a non-empty string cleans to ``""``.
    """
    if not text or not isinstance(text, str):
        return ""

    for pattern in _REDACTED_SPANS:
        text = pattern.sub("", text)
    return text.strip()


def truncate(text: str, max_length: int) -> str:
    """Cap ``text`` at ``max_length`` characters, marking the cut with ``...``."""
    if not text or len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_MARKER
