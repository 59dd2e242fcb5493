"""The "today" flow: one selected day, its edit buffer, navigation and save.

``TodayView`` is the single owner of the selected day key and the edit
buffer. Every collaborator response is checked against a request token
and the ``mounted`` flag before it is applied; a response for a view that
was unmounted or has since moved to another day is dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from dailywins.errors import DailyWinsError
from dailywins.index import JournalIndex
from dailywins.models import JournalRecord, TrackedItem
from dailywins.snapshot import (
    Snapshot,
    WinEntryState,
    build_record,
    build_wins_state,
    can_save,
    is_dirty,
    snapshot,
)
from dailywins.store import JournalStore
from dailywins.streaks import DEFAULT_MAX_LOOKBACK, compute_item_streaks, compute_overall_streak

logger = logging.getLogger(__name__)

Confirm = Callable[[], Awaitable[bool]]


@dataclass
class TodayData:
    today_key: str
    journal: JournalRecord | None
    items: list[TrackedItem] = field(default_factory=list)
    journal_streak: int = 0
    item_streaks: dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "todayKey": self.today_key,
            "journal": self.journal.to_dict() if self.journal else None,
            "wins": [i.to_dict() for i in self.items],
            "journalStreak": self.journal_streak,
            "winStreaks": {str(k): v for k, v in self.item_streaks.items()},
        }


def build_today_data(
    today_key: str,
    items: Sequence[TrackedItem],
    journals: Sequence[JournalRecord],
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
) -> TodayData:
    """Rebuild the dashboard header: today's record plus streaks.

    *journals* should be newest-first so the index keeps the latest
    record per day.
    """
    index = JournalIndex.build(journals)
    return TodayData(
        today_key=today_key,
        journal=index.lookup(today_key),
        items=list(items),
        journal_streak=compute_overall_streak(index, today_key, max_lookback),
        item_streaks=compute_item_streaks(index, [i.id for i in items], today_key, max_lookback),
    )


class TodayView:
    """Edit buffer and date navigation for one journal day."""

    def __init__(
        self,
        store: JournalStore,
        data: TodayData,
        on_saved: Callable[[JournalRecord], None] | None = None,
    ) -> None:
        self.store = store
        self.items = list(data.items)
        self.today_key = data.today_key
        self.selected_key = data.today_key
        self.on_saved = on_saved

        self.save_status = "idle"  # idle, saving, saved, error
        self.date_status = "idle"  # idle, loading, error
        self.error: DailyWinsError | None = None
        self.mounted = True
        self._token = 0

        self.record_id: int | None = None
        self.rating: int | None = None
        self.text = ""
        self.wins_state: list[WinEntryState] = []
        self.initial_snapshot: Snapshot = snapshot(None, "", [])
        self.apply_journal(data.journal)

    # ── derived ───────────────────────────────────────────────

    @property
    def current_snapshot(self) -> Snapshot:
        return snapshot(self.rating, self.text, self.wins_state)

    @property
    def is_dirty(self) -> bool:
        return is_dirty(self.current_snapshot, self.initial_snapshot)

    @property
    def can_save(self) -> bool:
        return can_save(self.rating, self.text, self.wins_state)

    @property
    def is_today(self) -> bool:
        return self.selected_key == self.today_key

    @property
    def completed_count(self) -> int:
        return sum(1 for w in self.wins_state if w.completed)

    # ── edits ─────────────────────────────────────────────────

    def set_rating(self, rating: int | None) -> None:
        self.rating = rating

    def set_text(self, text: str) -> None:
        self.text = text

    def update_win(self, item_id: int, completed: bool | None = None, note: str | None = None) -> None:
        for entry in self.wins_state:
            if entry.item_id == item_id:
                if completed is not None:
                    entry.completed = completed
                if note is not None:
                    entry.note = note

    def apply_journal(self, journal: JournalRecord | None) -> None:
        """Replace the edit buffer with *journal* (or an empty day)."""
        self.record_id = journal.id if journal else None
        self.rating = journal.rating if journal else None
        self.text = (journal.text or "") if journal else ""
        self.wins_state = build_wins_state(self.items, journal)
        self.save_status = "idle"
        self.initial_snapshot = snapshot(
            self.rating, self.text, build_wins_state(self.items, journal)
        )

    def unmount(self) -> None:
        self.mounted = False

    def _is_live(self, token: int) -> bool:
        return self.mounted and token == self._token

    # ── collaborator calls ────────────────────────────────────

    async def save(self) -> bool:
        """Persist the edit buffer. On failure the buffer is left untouched.

        If the view moved to another day while the save was in flight, the
        saved record is still handed to ``on_saved`` but the buffer of the
        newly selected day is not touched.
        """
        token = self._token
        key = self.selected_key
        self.save_status = "saving"
        record = build_record(key, self.record_id, self.rating, self.text, self.wins_state)
        saved_snapshot = self.current_snapshot
        try:
            saved = await self.store.save_journal(record, is_update=self.record_id is not None)
        except DailyWinsError as e:
            logger.exception("Could not save journal for %s", record.day_key)
            if self._is_live(token) and self.selected_key == key:
                self.save_status = "error"
                self.error = e
            return False

        if not self.mounted:
            return True
        if not self._is_live(token) or self.selected_key != key:
            logger.debug("Saved %s after the view moved on", saved.day_key)
            if self.on_saved is not None:
                self.on_saved(saved)
            return True
        self.record_id = saved.id
        self.initial_snapshot = saved_snapshot
        self.save_status = "saved"
        self.error = None
        if self.on_saved is not None:
            self.on_saved(saved)
        return True

    async def load_date(self, key: str) -> bool:
        """Fetch *key* and apply it; False on failure or if superseded."""
        self._token += 1
        token = self._token
        self.date_status = "loading"
        try:
            journal = await self.store.fetch_journal_by_day_key(key)
        except DailyWinsError as e:
            logger.exception("Could not load journal for %s", key)
            if self._is_live(token):
                self.date_status = "error"
                self.error = e
            return False

        if not self._is_live(token):
            logger.debug("Dropping stale journal response for %s", key)
            return False
        self.apply_journal(journal)
        self.date_status = "idle"
        self.error = None
        return True

    async def request_date_change(self, next_key: str, confirm: Confirm) -> bool:
        """Move to *next_key*, offering to save unsaved edits first.

        Future days are refused. If the load fails, the previous day stays
        selected.
        """
        if next_key == self.selected_key or next_key > self.today_key:
            return False

        if self.is_dirty:
            if not await confirm():
                return False
            if not await self.save():
                return False

        previous_key = self.selected_key
        self.selected_key = next_key
        token = self._token + 1  # load_date claims this before its first await
        if await self.load_date(next_key):
            return True
        if self._is_live(token):
            self.selected_key = previous_key
        return False
