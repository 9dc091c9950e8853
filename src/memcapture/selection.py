"""Select the transcript entries that are new since the last capture."""
from __future__ import annotations

from collections.abc import Sequence

from memcapture.transcript.entries import TranscriptEntry


def select_new_entries(
    entries: Sequence[TranscriptEntry], last_uuid: str | None
) -> list[TranscriptEntry]:
    """Return user/assistant entries after ``last_uuid``, in file order.

    With no ``last_uuid`` every message entry is new. A ``last_uuid`` that
    matches nothing selects nothing; the cursor is left for a later run
    rather than re-capturing the whole history.
    """
    if not last_uuid:
        return [e for e in entries if e.is_message]

    found_last = False
    new_entries = []

    for entry in entries:
        if not found_last:
            found_last = entry.uuid == last_uuid
            continue
        if entry.is_message:
            new_entries.append(entry)

    return new_entries
