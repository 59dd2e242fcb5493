"""Identity-keyed merging of held and freshly fetched journal records."""

from __future__ import annotations

from collections.abc import Sequence

from dailywins.models import JournalRecord


def reconcile(cached: Sequence[JournalRecord], fresh: Sequence[JournalRecord]) -> list[JournalRecord]:
    """Union of *cached* and *fresh* keyed by record id.

    A fresh copy replaces the cached one in place; records only in *fresh*
    are appended in fresh order. Records without an id cannot collide and
    are kept as they are.
    """
    fresh_by_id: dict[int, JournalRecord] = {}
    for record in fresh:
        if record.id is not None:
            fresh_by_id.setdefault(record.id, record)

    merged: list[JournalRecord] = []
    seen: set[int] = set()
    for record in cached:
        if record.id is None:
            merged.append(record)
            continue
        if record.id in seen:
            continue
        seen.add(record.id)
        merged.append(fresh_by_id.get(record.id, record))

    for record in fresh:
        if record.id is None:
            merged.append(record)
        elif record.id not in seen:
            seen.add(record.id)
            merged.append(record)
    return merged


def apply_saved_record(current: Sequence[JournalRecord], saved: JournalRecord) -> list[JournalRecord]:
    """Put *saved* first and drop any other copy of the same record."""
    return [saved] + [r for r in current if r.id is None or r.id != saved.id]
