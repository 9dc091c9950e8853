"""Core Transcript class for loading transcript data."""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import ValidationError

from memcapture.transcript.entries import TranscriptEntry, parse_entry

logger = logging.getLogger(__name__)


def parse_lines(lines: Iterable[str]) -> list[TranscriptEntry]:
    """Decode JSONL lines into entries, in order.

    Each line is decoded on its own. Blank lines are skipped, and lines
    that are not a JSON object or do not validate are dropped: the
    transcript may be mid-append by another writer.
    """
    entries: list[TranscriptEntry] = []

    for line_num, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Skipping unparseable line %d", line_num)
            continue
        if not isinstance(data, dict):
            logger.debug("Skipping non-object line %d", line_num)
            continue
        try:
            entry = parse_entry(data)
        except ValidationError as e:
            logger.debug("Skipping invalid entry on line %d: %s", line_num, e)
            continue

        entries.append(entry)

    return entries


class Transcript:
    """
    Read-only view of a JSONL transcript file.

    Usage:
        transcript = Transcript("/path/to/transcript.jsonl")
        transcript.load()

        for entry in transcript:
            print(entry.uuid)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

        # All entries in file order
        self.entries: list[TranscriptEntry] = []

    def load(self) -> None:
        """Load entries from the JSONL file. A missing file loads as empty."""
        self.entries = []

        if not self.path.exists():
            return

        with open(self.path, encoding="utf-8", errors="replace") as f:
            self.entries = parse_lines(f)

    # === Iteration ===

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Transcript({self.path}, entries={len(self.entries)})"


def parse_transcript(path: str | Path) -> list[TranscriptEntry]:
    """Load every decodable entry of the transcript at ``path``."""
    transcript = Transcript(path)
    transcript.load()
    return transcript.entries
