"""Shared test fixtures for DailyWins tests."""

from __future__ import annotations

import json
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml

from dailywins.index import JournalIndex
from helpers import ITEMS, march_records


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary workspace with settings, wins and a week of journals."""
    root = tmp_path / "workspace"
    root.mkdir()

    settings = {
        "timezone": "America/New_York",
        "streak_lookback_days": 60,
        "recent_journal_limit": 60,
    }
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    wins = {
        "wins": [item.to_dict() for item in ITEMS]
        + [{"id": 3, "name": "Meditate", "active": False, "order": 3}],
    }
    (root / "wins.yaml").write_text(
        yaml.dump(wins, default_flow_style=False, sort_keys=False), encoding="utf-8"
    )

    tz = ZoneInfo("America/New_York")
    journals = {"docs": [r.to_dict(tz) for r in march_records()]}
    (root / "journals.json").write_text(json.dumps(journals, indent=2), encoding="utf-8")

    monkeypatch.setenv("DAILYWINS_ROOT", str(root))
    return root


@pytest.fixture
def march_index() -> JournalIndex:
    return JournalIndex.build(march_records())
