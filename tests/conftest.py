"""Shared fixtures for memcapture tests."""
import json
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep cursors and settings out of the real home directory."""
    home = tmp_path / "memcapture-home"
    monkeypatch.setenv("MEMCAPTURE_HOME", str(home))
    monkeypatch.delenv("MEMCAPTURE_INCLUDE_TOOLS", raising=False)
    return home


@pytest.fixture
def write_transcript(tmp_path):
    """Write entries (dicts or raw strings) as a JSONL transcript."""

    def _write(entries, name="transcript.jsonl") -> Path:
        path = tmp_path / name
        lines = [e if isinstance(e, str) else json.dumps(e) for e in entries]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
