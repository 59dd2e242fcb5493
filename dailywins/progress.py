"""The "progress" flow: a year of journal records shown as a calendar grid."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import tzinfo

from dailywins.daykey import year_range
from dailywins.errors import DailyWinsError
from dailywins.grid import build_week_grid, build_year_grid
from dailywins.index import JournalIndex
from dailywins.models import DayState, JournalRecord
from dailywins.reconcile import reconcile
from dailywins.store import JournalStore

logger = logging.getLogger(__name__)

LAYOUTS = ("month", "week")


class ProgressView:
    """Holds the records seen so far and the year being displayed.

    Fetched pages are reconciled into the held set, so moving between
    years or receiving the dashboard's recent records never drops or
    duplicates an entry.
    """

    def __init__(
        self,
        store: JournalStore,
        current_year: int,
        journals: Sequence[JournalRecord] = (),
        tz: tzinfo | None = None,
        year_limit: int = 366,
    ) -> None:
        self.store = store
        self.tz = tz
        self.year_limit = year_limit
        self.current_year = current_year
        self.year = current_year
        self.layout = "month"
        self.records: list[JournalRecord] = list(journals)
        self.load_state = "idle"  # idle, loading, error
        self.error: DailyWinsError | None = None
        self.mounted = True
        self._token = 0
        self._index = JournalIndex.build(self.records)

    @property
    def index(self) -> JournalIndex:
        return self._index

    def _set_records(self, records: list[JournalRecord]) -> None:
        self.records = records
        self._index = JournalIndex.build(records)

    def merge_incoming(self, journals: Sequence[JournalRecord]) -> None:
        """Fold records supplied by the owner (e.g. after a save) into the held set."""
        if not journals:
            return
        self._set_records(reconcile(self.records, journals))

    def set_layout(self, layout: str) -> None:
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown layout: {layout!r}")
        self.layout = layout

    def unmount(self) -> None:
        self.mounted = False

    async def load_year(self, year: int | None = None) -> bool:
        """Fetch a whole year; previously held records stay on failure."""
        if year is not None:
            self.year = year
        self._token += 1
        token = self._token
        target = self.year
        self.load_state = "loading"
        start, end = year_range(target, self.tz)
        try:
            fresh = await self.store.fetch_journals_in_range(start, end, sort="-date", limit=self.year_limit)
        except DailyWinsError as e:
            logger.exception("Could not load journals for %s", target)
            if self.mounted and token == self._token:
                self.load_state = "error"
                self.error = e
            return False

        if not self.mounted or token != self._token:
            logger.debug("Dropping stale year response for %s", target)
            return False
        self._set_records(reconcile(self.records, fresh))
        self.load_state = "idle"
        self.error = None
        return True

    async def previous_year(self) -> bool:
        return await self.load_year(self.year - 1)

    async def next_year(self) -> bool:
        if self.year >= self.current_year:
            return False
        return await self.load_year(self.year + 1)

    # ── views ─────────────────────────────────────────────────

    def month_rows(self) -> list[tuple[str, list[DayState]]]:
        return build_year_grid(self.year, self._index)

    def week_cells(self) -> list[DayState | None]:
        return build_week_grid(self.year, self._index)
