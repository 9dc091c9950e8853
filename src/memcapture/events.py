"""Capture event models (Pydantic v2)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CaptureEvent(BaseModel):
    """Outcome of one capture pass that reached entry selection."""

    # Correlation
    session_id: str
    transcript_path: str

    # Timing
    timestamp: datetime = Field(default_factory=_utcnow)

    event_type: Literal["captured", "skipped"]
    reason: str | None = None  # Why a pass was skipped

    entries_selected: int = 0
    output_chars: int = 0
    previous_cursor: str | None = None
    cursor: str | None = None  # Stored after the pass
