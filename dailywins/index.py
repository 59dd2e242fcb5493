"""Day-key → journal record lookup, rebuilt whenever the record set changes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from dailywins.models import JournalRecord


class JournalIndex:
    """Immutable mapping from day key to the record logged on that day.

    When several records share a day key, the first one in input order wins;
    pass records newest-first if recency matters.
    """

    def __init__(self, by_day: dict[str, JournalRecord] | None = None) -> None:
        self._by_day: dict[str, JournalRecord] = dict(by_day or {})

    @classmethod
    def build(cls, records: Iterable[JournalRecord]) -> JournalIndex:
        by_day: dict[str, JournalRecord] = {}
        for record in records:
            if not record.day_key:
                continue
            by_day.setdefault(record.day_key, record)
        return cls(by_day)

    def lookup(self, key: str) -> JournalRecord | None:
        return self._by_day.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_day

    def __len__(self) -> int:
        return len(self._by_day)

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_day)
