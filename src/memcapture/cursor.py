"""Per-session capture cursor: the uuid of the last transcript entry captured."""
from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def memcapture_home() -> Path:
    """Root directory for memcapture state (``$MEMCAPTURE_HOME`` or ``~/.memcapture``)."""
    env = os.environ.get("MEMCAPTURE_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".memcapture"


class CaptureCursor:
    """One plain-text record per session under a tracker directory.

    The directory is created on first use. Writes replace the record
    wholesale via a temp file and ``os.replace``; concurrent writers for
    the same session are serialized with an advisory lock file.
    """

    def __init__(self, tracker_dir: str | Path | None = None) -> None:
        if tracker_dir is None:
            tracker_dir = memcapture_home() / "trackers"
        self.tracker_dir = Path(tracker_dir)

    def _ensure_dir(self) -> None:
        self.tracker_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Path:
        return self.tracker_dir / f"{session_id}.txt"

    def get(self, session_id: str) -> str | None:
        """Return the stored uuid for ``session_id``, or None if never captured."""
        self._ensure_dir()
        path = self._path(session_id)
        if not path.exists():
            return None
        value = path.read_text(encoding="utf-8").strip()
        return value or None

    def set(self, session_id: str, uuid: str) -> None:
        """Overwrite the stored uuid. Raises OSError if it cannot be written."""
        self._ensure_dir()
        path = self._path(session_id)
        lock_path = path.with_suffix(".lock")
        tmp_path = path.with_suffix(".tmp")

        with open(lock_path, "w", encoding="utf-8") as lock_file:
            try:
                import fcntl

                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            except (ImportError, OSError):
                pass  # fcntl not available or locking failed, proceed best-effort

            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    f.write(uuid)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except Exception:
                if tmp_path.exists():
                    tmp_path.unlink()
                raise
            finally:
                try:
                    lock_path.unlink()
                except OSError:
                    pass

        logger.debug("Cursor for session %s set to %s", session_id, uuid)

    def clear(self, session_id: str) -> bool:
        """Delete the stored cursor. Returns False if there was none."""
        path = self._path(session_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True
