"""Top-level owner of the held record set, shared by the today and progress flows."""

from __future__ import annotations

import logging
from datetime import date, tzinfo

from dailywins.daykey import day_start, shift_day_key
from dailywins.errors import DailyWinsError
from dailywins.models import JournalRecord, Settings, TrackedItem
from dailywins.progress import ProgressView
from dailywins.reconcile import apply_saved_record
from dailywins.store import JournalStore
from dailywins.today import TodayData, TodayView, build_today_data

logger = logging.getLogger(__name__)


class Dashboard:
    """Tracked items, recent journals and the derived today data.

    Derived state is rebuilt explicitly whenever the held records change,
    either by ``refresh_all`` or by the saved-record fast path.
    """

    def __init__(
        self,
        store: JournalStore,
        today_key: str,
        settings: Settings | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self.store = store
        self.today_key = today_key
        self.settings = settings or Settings()
        self.tz = tz
        self.items: list[TrackedItem] = []
        self.journals: list[JournalRecord] = []
        self.status = "idle"  # idle, loading, error
        self.error: DailyWinsError | None = None
        self.today_data = self._rebuild()
        self.today = TodayView(store, self.today_data, on_saved=self.handle_journal_saved)
        self.progress = ProgressView(
            store,
            current_year=date.fromisoformat(today_key).year,
            tz=tz,
            year_limit=self.settings.year_journal_limit,
        )

    @classmethod
    async def open(
        cls,
        store: JournalStore,
        today_key: str,
        settings: Settings | None = None,
        tz: tzinfo | None = None,
    ) -> Dashboard:
        """Load everything, then set up the today flow on today's record."""
        dashboard = cls(store, today_key, settings, tz)
        await dashboard.refresh_all()
        dashboard.today = TodayView(store, dashboard.today_data, on_saved=dashboard.handle_journal_saved)
        return dashboard

    @property
    def active_items(self) -> list[TrackedItem]:
        return [i for i in self.items if i.active]

    def _rebuild(self) -> TodayData:
        return build_today_data(
            self.today_key,
            self.active_items,
            self.journals,
            self.settings.streak_lookback_days,
        )

    async def refresh_all(self) -> bool:
        """Refetch tracked items and the recent journal window."""
        self.status = "loading"
        lookback = self.settings.streak_lookback_days
        start = day_start(shift_day_key(self.today_key, -lookback), self.tz)
        end = day_start(shift_day_key(self.today_key, 1), self.tz)
        try:
            items = await self.store.fetch_tracked_items(
                active_only=False, sort="order", limit=self.settings.tracked_item_limit
            )
            journals = await self.store.fetch_journals_in_range(
                start, end, sort="-date", limit=self.settings.recent_journal_limit
            )
        except DailyWinsError as e:
            logger.exception("Could not refresh dashboard")
            self.status = "error"
            self.error = e
            return False

        self.items = items
        self.journals = journals
        self.today_data = self._rebuild()
        self.progress.merge_incoming(journals)
        self.status = "idle"
        self.error = None
        return True

    def handle_journal_saved(self, saved: JournalRecord) -> None:
        """Fold a just-saved record in without refetching."""
        self.journals = apply_saved_record(self.journals, saved)
        self.today_data = self._rebuild()
        self.progress.merge_incoming([saved])
