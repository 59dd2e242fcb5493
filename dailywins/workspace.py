"""Workspace root, settings, timezone and path helpers for DailyWins."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dailywins.errors import ParseFailure
from dailywins.fileio import read_yaml
from dailywins.models import Settings

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Get the workspace root directory (holds settings.yaml, wins.yaml, journals.json)."""
    return Path(
        os.environ.get("DAILYWINS_ROOT", str(Path.home() / "dailywins"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def wins_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "wins.yaml"


def journals_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "journals.json"


# ── Settings & timezone ───────────────────────────────────────

def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml; a missing or unreadable file yields defaults."""
    try:
        return Settings.from_dict(read_yaml(settings_path(root)))
    except ParseFailure:
        logger.warning("settings.yaml is malformed, using defaults")
        return Settings()


def get_user_timezone(root: Path | None = None, settings: Settings | None = None) -> ZoneInfo:
    """Get the workspace timezone, defaulting to UTC."""
    if settings is None:
        settings = load_settings(root)
    try:
        return ZoneInfo(settings.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", settings.timezone)
        return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in the workspace timezone."""
    return datetime.now(get_user_timezone(root))


def today_key(root: Path | None = None) -> str:
    """Get today's day key (YYYY-MM-DD) in the workspace timezone."""
    return now_local(root).date().isoformat()
