"""JSONL event log of capture passes, one file per session."""
from __future__ import annotations

import os
import uuid
from pathlib import Path

from memcapture.events import CaptureEvent


class CaptureLogger:
    """Appends CaptureEvents to ``captures-<session_id>.jsonl``.

    ``latest.jsonl`` is kept pointing at the most recently written file.
    """

    def __init__(self, log_dir: str | Path) -> None:
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def log_path(self, session_id: str) -> Path:
        return self.log_dir / f"captures-{session_id or 'unknown'}.jsonl"

    def log(self, event: CaptureEvent) -> None:
        path = self.log_path(event.session_id)
        with open(path, "a", encoding="utf-8") as f:
            f.write(event.model_dump_json() + "\n")
        self._update_symlink(path)

    def _update_symlink(self, target: Path) -> None:
        # Built under a unique name and renamed over, so overlapping runs
        # never see a missing link
        latest = self.log_dir / "latest.jsonl"
        tmp_link = self.log_dir / f".latest-{uuid.uuid4().hex}.tmp"
        tmp_link.symlink_to(target.name)
        try:
            os.replace(tmp_link, latest)
        except OSError:
            tmp_link.unlink()
            raise
