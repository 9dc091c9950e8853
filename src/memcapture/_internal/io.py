"""Hook payload I/O."""
from __future__ import annotations

import json
from typing import IO, Any


def read_stdin(stdin: IO[str]) -> dict[str, Any] | None:
    """Read a JSON object from ``stdin``.

    Returns None for empty input or anything that is not a JSON object.
    """
    raw = stdin.read()
    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def write_stdout(text: str, stdout: IO[str]) -> None:
    stdout.write(text)
    if not text.endswith("\n"):
        stdout.write("\n")
    stdout.flush()
