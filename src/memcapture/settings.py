"""Capture settings and the tool inclusion policy.

Settings are merged from, lowest precedence first:

1. Built-in defaults
2. ``$MEMCAPTURE_HOME/settings.json`` (home defaults to ``~/.memcapture``)
3. ``<cwd>/.claude/memcapture.json``
4. ``MEMCAPTURE_INCLUDE_TOOLS`` (comma separated tool names)
"""
from __future__ import annotations

import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from memcapture.cursor import memcapture_home

DEFAULT_INCLUDE_TOOLS = ["Edit", "Write"]
INCLUDE_ALL = "*"

PROJECT_SETTINGS_PATH = Path(".claude") / "memcapture.json"
INCLUDE_TOOLS_ENV = "MEMCAPTURE_INCLUDE_TOOLS"


class SettingsError(ValueError):
    """A settings file could not be read or did not validate."""


class CaptureSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    include_tools: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE_TOOLS),
        alias="includeTools",
        description="Tools rendered with full input and result; '*' includes all",
    )
    log_dir: Path | None = Field(
        default=None,
        alias="logDir",
        description="Directory for the capture event log (disabled when unset)",
    )

    @field_validator("log_dir")
    @classmethod
    def _expand_log_dir(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None


class CaptureContext(BaseModel):
    """Working-directory-derived configuration for one capture run."""

    cwd: Path
    include_tools: list[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE_TOOLS))
    log_dir: Path | None = None

    @classmethod
    def from_cwd(cls, cwd: str | Path) -> CaptureContext:
        settings = load_settings(cwd)
        return cls(cwd=Path(cwd), include_tools=settings.include_tools, log_dir=settings.log_dir)


def should_include_tool(tool_name: str, include_tools: Iterable[str]) -> bool:
    """Whether ``tool_name`` gets detailed rendering under ``include_tools``."""
    tools = set(include_tools)
    return INCLUDE_ALL in tools or tool_name in tools


def _read_json(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SettingsError(f"Cannot read settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a JSON object")
    return data


def load_settings(cwd: str | Path | None = None) -> CaptureSettings:
    """Resolve settings for a working directory.

    A relative ``logDir`` is taken relative to the directory the file
    configures: the memcapture home for the home file, ``cwd`` for the
    project file.
    """
    merged: dict[str, Any] = {}
    home = memcapture_home()
    sources = [(home / "settings.json", home)]
    if cwd is not None:
        sources.append((Path(cwd) / PROJECT_SETTINGS_PATH, Path(cwd)))

    for path, base in sources:
        data = _read_json(path)
        try:
            # Validate each layer on its own so errors name the right file
            layer = CaptureSettings.model_validate(data)
        except ValidationError as e:
            raise SettingsError(f"Invalid settings in {path}: {e}") from e
        if layer.log_dir is not None and not layer.log_dir.is_absolute():
            layer.log_dir = base / layer.log_dir
        merged.update(layer.model_dump(exclude_unset=True))

    settings = CaptureSettings.model_validate(merged)

    env_tools = os.environ.get(INCLUDE_TOOLS_ENV)
    if env_tools is not None:
        settings.include_tools = [t.strip() for t in env_tools.split(",") if t.strip()]

    return settings
