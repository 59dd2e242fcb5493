"""Persistence collaborator for DailyWins.

``JournalStore`` is the async interface the flows consume. ``FileJournalStore``
implements it over the workspace directory:

- ``journals.json``: ``{"docs": [record, ...]}`` in save order
- ``wins.yaml``: ``{"wins": [tracked item, ...]}``

Storage errors surface as TransportFailure, malformed documents as
ParseFailure. "No matching data" is an empty result, never an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Protocol, TypeVar

from dailywins.daykey import day_start, parse_day_key
from dailywins.errors import ParseFailure, RecordNotFound, TransportFailure, ValidationFailure
from dailywins.fileio import read_json, read_yaml, write_json_atomic, write_yaml_atomic
from dailywins.models import JournalRecord, TrackedItem, validate_rating
from dailywins.workspace import get_user_timezone, journals_path, wins_path, workspace_root

logger = logging.getLogger(__name__)

T = TypeVar("T")

JOURNAL_SORTS = {"date", "-date"}
ITEM_SORT_FIELDS = {"order", "name", "id"}
ITEM_FIELDS = {"name", "description", "active", "order"}


class JournalStore(Protocol):
    async def fetch_journal_by_day_key(self, key: str) -> JournalRecord | None: ...

    async def fetch_journals_in_range(
        self,
        start: datetime,
        end: datetime,
        sort: str = "-date",
        limit: int | None = None,
    ) -> list[JournalRecord]: ...

    async def fetch_tracked_items(
        self,
        active_only: bool = True,
        sort: str = "order",
        limit: int | None = None,
    ) -> list[TrackedItem]: ...

    async def save_journal(self, record: JournalRecord, is_update: bool) -> JournalRecord: ...


def _sort_journals(records: list[JournalRecord], sort: str) -> list[JournalRecord]:
    if sort not in JOURNAL_SORTS:
        raise ValidationFailure(f"Unsupported journal sort: {sort!r}")
    return sorted(records, key=lambda r: (r.day_key, r.id or 0), reverse=sort.startswith("-"))


def _sort_items(items: list[TrackedItem], sort: str) -> list[TrackedItem]:
    field_name = sort.lstrip("-")
    if field_name not in ITEM_SORT_FIELDS:
        raise ValidationFailure(f"Unsupported tracked item sort: {sort!r}")
    return sorted(items, key=lambda i: (getattr(i, field_name), i.id), reverse=sort.startswith("-"))


class FileJournalStore:
    """JournalStore backed by atomic JSON/YAML files in the workspace."""

    def __init__(self, root: Path | None = None, tz: tzinfo | None = None) -> None:
        self.root = root if root is not None else workspace_root()
        self.tz = tz if tz is not None else get_user_timezone(self.root)

    # ── raw documents ─────────────────────────────────────────

    def _io(self, action: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except OSError as e:
            raise TransportFailure(f"Could not {action}: {e}") from e

    def _load_journals(self) -> list[JournalRecord]:
        path = journals_path(self.root)
        data = self._io(f"read {path.name}", lambda: read_json(path))
        docs = data.get("docs", [])
        if not isinstance(docs, list):
            raise ParseFailure(f"{path.name}: 'docs' must be a list")
        return [JournalRecord.from_dict(d, self.tz) for d in docs]

    def _write_journals(self, records: list[JournalRecord]) -> None:
        path = journals_path(self.root)
        payload = {"docs": [r.to_dict(self.tz) for r in records]}
        self._io(f"write {path.name}", lambda: write_json_atomic(path, payload))

    def _load_items(self) -> list[TrackedItem]:
        path = wins_path(self.root)
        data = self._io(f"read {path.name}", lambda: read_yaml(path))
        raw = data.get("wins") or []
        if not isinstance(raw, list):
            raise ParseFailure(f"{path.name}: 'wins' must be a list")
        return [TrackedItem.from_dict(d) for d in raw]

    def _write_items(self, items: list[TrackedItem]) -> None:
        path = wins_path(self.root)
        payload = {"wins": [i.to_dict() for i in items]}
        self._io(f"write {path.name}", lambda: write_yaml_atomic(path, payload))

    # ── journals ──────────────────────────────────────────────

    async def fetch_journal_by_day_key(self, key: str) -> JournalRecord | None:
        for record in self._load_journals():
            if record.day_key == key:
                return record
        return None

    async def fetch_journals_in_range(
        self,
        start: datetime,
        end: datetime,
        sort: str = "-date",
        limit: int | None = None,
    ) -> list[JournalRecord]:
        matches = [
            r for r in self._load_journals()
            if start <= day_start(r.day_key, self.tz) < end
        ]
        matches = _sort_journals(matches, sort)
        return matches[:limit] if limit is not None else matches

    async def fetch_recent_journals(self, sort: str = "-date", limit: int | None = None) -> list[JournalRecord]:
        records = _sort_journals(self._load_journals(), sort)
        return records[:limit] if limit is not None else records

    async def save_journal(self, record: JournalRecord, is_update: bool) -> JournalRecord:
        """Create (assigning an id) or update (preserving the id) a record."""
        validate_rating(record.rating)
        parse_day_key(record.day_key)
        records = self._load_journals()

        if is_update:
            if record.id is None:
                raise ValidationFailure("Cannot update a journal without an id")
            for i, existing in enumerate(records):
                if existing.id == record.id:
                    records[i] = saved = replace(record)
                    break
            else:
                raise RecordNotFound(f"Journal not found: {record.id}")
        else:
            next_id = max((r.id or 0 for r in records), default=0) + 1
            saved = replace(record, id=next_id)
            records.append(saved)

        self._write_journals(records)
        logger.info("Saved journal %s for %s", saved.id, saved.day_key)
        return saved

    # ── tracked items ─────────────────────────────────────────

    async def fetch_tracked_items(
        self,
        active_only: bool = True,
        sort: str = "order",
        limit: int | None = None,
    ) -> list[TrackedItem]:
        items = self._load_items()
        if active_only:
            items = [i for i in items if i.active]
        items = _sort_items(items, sort)
        return items[:limit] if limit is not None else items

    async def create_tracked_item(
        self,
        name: str,
        description: str | None = None,
        active: bool = True,
    ) -> TrackedItem:
        if not (name or "").strip():
            raise ValidationFailure("Tracked item name is required")
        items = self._load_items()
        item = TrackedItem(
            id=max((i.id for i in items), default=0) + 1,
            name=name.strip(),
            description=(description or "").strip() or None,
            active=active,
            order=max((i.order for i in items), default=0) + 1,
        )
        items.append(item)
        self._write_items(items)
        return item

    async def update_tracked_item(self, item_id: int, changes: dict[str, Any]) -> TrackedItem:
        unknown = set(changes) - ITEM_FIELDS
        if unknown:
            raise ValidationFailure(f"Unknown tracked item fields: {', '.join(sorted(unknown))}")
        if "name" in changes and not str(changes["name"] or "").strip():
            raise ValidationFailure("Tracked item name is required")
        if "active" in changes and not isinstance(changes["active"], bool):
            raise ValidationFailure(f"Tracked item active must be true or false, got {changes['active']!r}")
        items = self._load_items()
        for i, item in enumerate(items):
            if item.id == item_id:
                try:
                    updated = TrackedItem.from_dict({**item.to_dict(), **changes})
                except ParseFailure as e:
                    raise ValidationFailure(str(e)) from e
                items[i] = updated
                break
        else:
            raise RecordNotFound(f"Tracked item not found: {item_id}")
        self._write_items(items)
        return updated
