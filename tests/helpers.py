"""Shared builders and an in-memory JournalStore for DailyWins tests."""

from __future__ import annotations

import asyncio
from dataclasses import replace

from dailywins.daykey import day_start, shift_day_key
from dailywins.errors import RecordNotFound, TransportFailure
from dailywins.models import JournalRecord, TrackedItem, WinEntry

EXERCISE = TrackedItem(id=1, name="Exercise", order=1)
READ = TrackedItem(id=2, name="Read", description="20 pages", order=2)
ITEMS = [EXERCISE, READ]


def make_record(
    day_key: str,
    id: int | None = None,
    rating: int | None = None,
    text: str | None = None,
    completed: tuple[int, ...] = (),
    skipped: tuple[int, ...] = (),
) -> JournalRecord:
    wins = [WinEntry(item_id=i, completed=True) for i in completed]
    wins += [WinEntry(item_id=i, completed=False) for i in skipped]
    return JournalRecord(day_key=day_key, id=id, rating=rating, text=text, wins=wins)


def march_records() -> list[JournalRecord]:
    """2024-03-01..05, no gaps. Exercise done every day but the 3rd; Read only on the 5th."""
    records = []
    for offset in range(5):
        key = shift_day_key("2024-03-01", offset)
        completed = () if key == "2024-03-03" else (EXERCISE.id,)
        if key == "2024-03-05":
            completed = (EXERCISE.id, READ.id)
        skipped = (EXERCISE.id,) if key == "2024-03-03" else ()
        records.append(make_record(key, id=offset + 1, rating=3, completed=completed, skipped=skipped))
    return records


class FakeStore:
    """In-memory JournalStore with switchable failures and per-day gates."""

    def __init__(self, records=(), items=()) -> None:
        self.records: list[JournalRecord] = list(records)
        self.items: list[TrackedItem] = list(items)
        self.fail_fetch = False
        self.fail_save = False
        self.gates: dict[str, asyncio.Event] = {}
        self.save_gate: asyncio.Event | None = None
        self.saved: list[tuple[JournalRecord, bool]] = []
        self.fetched_days: list[str] = []

    def gate(self, key: str) -> asyncio.Event:
        self.gates[key] = asyncio.Event()
        return self.gates[key]

    def gate_save(self) -> asyncio.Event:
        self.save_gate = asyncio.Event()
        return self.save_gate

    async def fetch_journal_by_day_key(self, key):
        self.fetched_days.append(key)
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if self.fail_fetch:
            raise TransportFailure("offline")
        return next((r for r in self.records if r.day_key == key), None)

    async def fetch_journals_in_range(self, start, end, sort="-date", limit=None):
        if self.fail_fetch:
            raise TransportFailure("offline")
        matches = [r for r in self.records if start <= day_start(r.day_key, start.tzinfo) < end]
        matches.sort(key=lambda r: (r.day_key, r.id or 0), reverse=sort.startswith("-"))
        return matches[:limit] if limit is not None else matches

    async def fetch_tracked_items(self, active_only=True, sort="order", limit=None):
        if self.fail_fetch:
            raise TransportFailure("offline")
        items = [i for i in self.items if i.active or not active_only]
        items.sort(key=lambda i: i.order)
        return items[:limit] if limit is not None else items

    async def save_journal(self, record, is_update):
        if self.save_gate is not None:
            await self.save_gate.wait()
        if self.fail_save:
            raise TransportFailure("offline")
        if is_update:
            for i, existing in enumerate(self.records):
                if existing.id == record.id:
                    self.records[i] = record
                    break
            else:
                raise RecordNotFound(str(record.id))
            saved = record
        else:
            saved = replace(record, id=max((r.id or 0 for r in self.records), default=0) + 1)
            self.records.append(saved)
        self.saved.append((saved, is_update))
        return saved


def accept():
    async def confirm() -> bool:
        return True
    return confirm


def decline():
    async def confirm() -> bool:
        return False
    return confirm
