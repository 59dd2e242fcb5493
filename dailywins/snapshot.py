"""Edit-buffer helpers: per-item win state, dirty detection, save payloads."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from dailywins.models import JournalRecord, TrackedItem, WinEntry

Snapshot = tuple[int | None, str, tuple[tuple[int, bool, str], ...]]


@dataclass
class WinEntryState:
    item_id: int
    completed: bool = False
    note: str = ""


def build_wins_state(items: Sequence[TrackedItem], record: JournalRecord | None) -> list[WinEntryState]:
    """One entry per tracked item, in item order, filled from *record*."""
    states = []
    for item in items:
        entry = None
        if record is not None:
            entry = next((w for w in record.wins if w.item_id == item.id), None)
        states.append(WinEntryState(
            item_id=item.id,
            completed=bool(entry and entry.completed),
            note=(entry.note or "") if entry else "",
        ))
    return states


def snapshot(rating: int | None, text: str, wins_state: Sequence[WinEntryState]) -> Snapshot:
    # Order-sensitive: wins_state follows the tracked item fetch order.
    return (
        rating,
        (text or "").strip(),
        tuple((w.item_id, w.completed, (w.note or "").strip()) for w in wins_state),
    )


def is_dirty(current: Snapshot, initial: Snapshot) -> bool:
    return current != initial


def can_save(rating: int | None, text: str, wins_state: Sequence[WinEntryState]) -> bool:
    return bool(rating or (text or "").strip() or any(w.completed for w in wins_state))


def build_record(
    day_key: str,
    record_id: int | None,
    rating: int | None,
    text: str,
    wins_state: Sequence[WinEntryState],
) -> JournalRecord:
    """Turn the edit buffer into a record to save; only completed wins are sent."""
    return JournalRecord(
        day_key=day_key,
        id=record_id,
        rating=rating,
        text=(text or "").strip() or None,
        wins=[
            WinEntry(item_id=w.item_id, completed=True, note=(w.note or "").strip() or None)
            for w in wins_state
            if w.completed
        ],
    )
