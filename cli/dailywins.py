#!/usr/bin/env python3
"""DailyWins TUI: daily check-in and year progress, powered by Textual."""

from __future__ import annotations

import logging
import sys
from datetime import date

from rich.text import Text
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from dailywins import (
    Dashboard,
    DayState,
    DayStatus,
    FileJournalStore,
    ProgressView,
    TrackedItem,
    WinEntryState,
    get_user_timezone,
    load_settings,
    shift_day_key,
    today_key,
    workspace_root,
)

logger = logging.getLogger(__name__)

RATING_STYLES = {1: "red", 2: "dark_orange", 3: "yellow", 4: "green_yellow", 5: "green"}
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#today-pane {
    width: 1fr;
    padding: 0 1;
}

#date-bar {
    height: 1;
    text-style: bold;
    margin: 1 0 0 0;
}

#rating-bar {
    height: 1;
    color: $warning;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
}

#wins-list {
    height: auto;
    max-height: 50%;
}

.win-row {
    height: auto;
}

.win-row Checkbox {
    width: 1fr;
    height: auto;
}

.win-done Checkbox {
    text-style: strike;
}

.streak-chip {
    width: auto;
    padding: 1 1 0 1;
    color: $text-muted;
}

.note-input {
    width: 1fr;
    height: 3;
}

#journal-area {
    height: 8;
    min-height: 4;
}

#save-status {
    height: 1;
    color: $text-muted;
}

#progress-pane {
    width: 1fr;
    padding: 1 2;
    display: none;
}

#progress-grid {
    height: auto;
    padding: 1 0;
}

#confirm-dialog {
    width: 60;
    height: auto;
    padding: 1 2;
    border: thick $warning;
    background: $panel;
}

#confirm-buttons {
    height: auto;
    margin: 1 0 0 0;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class WinRow(Horizontal):
    """One tracked item: checkbox + streak + note."""

    def __init__(self, item: TrackedItem, entry: WinEntryState, streak: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.item = item
        self.entry = entry
        self.streak = streak

    def compose(self) -> ComposeResult:
        label = self.item.name
        if self.item.description:
            label = f"{label} ({self.item.description})"
        yield Checkbox(label, value=self.entry.completed)
        yield Label(f"{self.streak}d", classes="streak-chip")
        yield Input(value=self.entry.note, placeholder="note…", classes="note-input")

    def on_mount(self) -> None:
        self.add_class("win-row")
        if self.entry.completed:
            self.add_class("win-done")


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog; dismisses with True when the user picks Save."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(self.message),
            Horizontal(
                Button("Save", id="confirm-yes", variant="primary"),
                Button("Stay", id="confirm-no"),
                id="confirm-buttons",
            ),
            id="confirm-dialog",
        )

    @on(Button.Pressed)
    def _on_button(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")


def _day_cell(state: DayState | None) -> Text:
    if state is None:
        return Text("  ")
    if state.status is DayStatus.RATED:
        return Text("● ", style=RATING_STYLES.get(state.rating or 0, "white"))
    if state.status is DayStatus.UNRATED:
        return Text("● ", style="grey70")
    return Text("· ", style="grey37")


def render_progress(view: ProgressView) -> Text:
    """Year grid as rich text, in the view's current layout."""
    out = Text()
    if view.layout == "month":
        for label, days in view.month_rows():
            out.append(f"{label} ")
            for state in days:
                out.append_text(_day_cell(state))
            out.append("\n")
    else:
        cells = view.week_cells()
        for weekday in range(7):
            out.append(f"{WEEKDAY_LABELS[weekday]} ")
            for state in cells[weekday::7]:
                out.append_text(_day_cell(state))
            out.append("\n")
    out.append("\n· missing  ", style="grey37")
    out.append("● no rating  ", style="grey70")
    for value, style in RATING_STYLES.items():
        out.append("●", style=style)
    out.append(" 1-5")
    return out


# ── Main app ───────────────────────────────────────────────────


class DailyWinsApp(App):
    """DailyWins: small steps, big momentum."""

    TITLE = "DailyWins"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("left", "prev_day", "Prev day"),
        Binding("right", "next_day", "Next day"),
        Binding("1", "rate(1)", "Rate 1-5"),
        Binding("2", "rate(2)", show=False),
        Binding("3", "rate(3)", show=False),
        Binding("4", "rate(4)", show=False),
        Binding("5", "rate(5)", show=False),
        Binding("0", "rate(0)", "Clear rating", show=False),
        Binding("ctrl+s", "save", "Save"),
        Binding("p", "toggle_progress", "Progress"),
        Binding("l", "toggle_layout", "Layout"),
        Binding("comma", "prev_year", "Prev year", show=False),
        Binding("full_stop", "next_year", "Next year", show=False),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    current_view: reactive[str] = reactive("today")

    def __init__(self) -> None:
        super().__init__()
        self.root_path = workspace_root()
        self.settings = load_settings(self.root_path)
        self.tz = get_user_timezone(settings=self.settings)
        self.store = FileJournalStore(self.root_path, self.tz)
        self.dashboard: Dashboard | None = None

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Hide bindings that do nothing in the current view."""
        if action in {"toggle_layout", "prev_year", "next_year"}:
            return True if self.current_view == "progress" else None
        if action in {"prev_day", "next_day", "rate", "save"}:
            return True if self.current_view == "today" else None
        return True

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Static(id="date-bar"),
                Static(id="rating-bar"),
                Label("Wins", classes="section-title"),
                VerticalScroll(id="wins-list", can_focus=False),
                Label("Journal", classes="section-title"),
                TextArea(id="journal-area"),
                Static(id="save-status"),
                id="today-pane",
            ),
            Vertical(
                Label("Year overview", classes="section-title"),
                Static(id="progress-grid"),
                Static(id="progress-status"),
                id="progress-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._open_dashboard()

    @work(exclusive=True, group="open")
    async def _open_dashboard(self) -> None:
        self.dashboard = await Dashboard.open(
            self.store, today_key(self.root_path), self.settings, self.tz
        )
        if self.dashboard.status == "error":
            self.notify(f"Could not load journals: {self.dashboard.error}", title="Error", severity="error")
        await self._rebuild_today()
        await self.dashboard.progress.load_year()
        self._render_progress()

    # ── Today view ─────────────────────────────────────────────

    def _render_header(self) -> None:
        if self.dashboard is None:
            return
        view = self.dashboard.today
        day = date.fromisoformat(view.selected_key)
        label = day.strftime("%A, %b %d")
        if view.is_today:
            label = f"Today · {label}"
        self.query_one("#date-bar", Static).update(label)

        stars = "".join("★" if view.rating and i <= view.rating else "☆" for i in range(1, 6))
        streak = self.dashboard.today_data.journal_streak
        done = f"{view.completed_count} of {len(view.items)} checked"
        self.query_one("#rating-bar", Static).update(f"{stars}   🔥 {streak} days   {done}")

        status = {
            "saving": "Saving…",
            "saved": "Saved",
            "error": "Could not save",
        }.get(view.save_status, "")
        if view.date_status == "loading":
            status = "Loading…"
        elif view.date_status == "error":
            status = "Could not load that day"
        if view.is_dirty and not status:
            status = "Unsaved changes"
        self.query_one("#save-status", Static).update(status)

    async def _rebuild_today(self) -> None:
        """(Re)build win rows and journal text from the edit buffer."""
        if self.dashboard is None:
            return
        view = self.dashboard.today
        streaks = self.dashboard.today_data.item_streaks
        wins_list = self.query_one("#wins-list", VerticalScroll)
        await wins_list.remove_children()
        entries = {w.item_id: w for w in view.wins_state}
        rows = [
            WinRow(item, entries[item.id], streaks.get(item.id, 0))
            for item in view.items
            if item.id in entries
        ]
        if rows:
            await wins_list.mount(*rows)
        else:
            await wins_list.mount(Label("No active wins yet.", classes="muted"))
        self.query_one("#journal-area", TextArea).load_text(view.text)
        self._render_header()

    @on(Checkbox.Changed)
    def _on_win_toggle(self, event: Checkbox.Changed) -> None:
        row = event.checkbox.parent
        if self.dashboard is None or not isinstance(row, WinRow):
            return
        self.dashboard.today.update_win(row.item.id, completed=event.value)
        row.set_class(event.value, "win-done")
        self._render_header()

    @on(Input.Changed, ".note-input")
    def _on_note_change(self, event: Input.Changed) -> None:
        row = event.input.parent
        if self.dashboard is None or not isinstance(row, WinRow):
            return
        self.dashboard.today.update_win(row.item.id, note=event.value)
        self._render_header()

    @on(TextArea.Changed, "#journal-area")
    def _on_journal_change(self, event: TextArea.Changed) -> None:
        if self.dashboard is None:
            return
        self.dashboard.today.set_text(event.text_area.text)
        self._render_header()

    async def _confirm_leave(self) -> bool:
        return await self.push_screen_wait(
            ConfirmScreen("You have unsaved changes. Save before leaving this day?")
        )

    @work(group="nav")
    async def _navigate(self, offset: int) -> None:
        if self.dashboard is None:
            return
        view = self.dashboard.today
        target = shift_day_key(view.selected_key, offset)
        moved = await view.request_date_change(target, self._confirm_leave)
        if view.save_status == "error":
            self.notify(f"Could not save: {view.error}", title="Save failed", severity="error")
        elif view.date_status == "error":
            self.notify(f"Could not load {target}: {view.error}", title="Load failed", severity="warning")
        if moved:
            await self._rebuild_today()
        else:
            self._render_header()

    def action_prev_day(self) -> None:
        self._navigate(-1)

    def action_next_day(self) -> None:
        if self.dashboard is not None and not self.dashboard.today.is_today:
            self._navigate(1)

    def action_rate(self, value: int) -> None:
        if self.dashboard is None:
            return
        self.dashboard.today.set_rating(value or None)
        self._render_header()

    @work(exclusive=True, group="save")
    async def action_save(self) -> None:
        if self.dashboard is None:
            return
        view = self.dashboard.today
        if not view.can_save:
            self.notify("Add a rating, a win or a note first.", severity="warning")
            return
        self._render_header()
        if await view.save():
            self.notify(f"Saved {view.selected_key}", title="Saved", severity="information")
            await self._rebuild_today()
            self._render_progress()
        else:
            self.notify(f"Could not save: {view.error}", title="Save failed", severity="error")
            self._render_header()

    # ── Progress view ──────────────────────────────────────────

    def _render_progress(self) -> None:
        if self.dashboard is None:
            return
        view = self.dashboard.progress
        self.query_one("#progress-grid", Static).update(render_progress(view))
        status = f"{view.year} · {view.layout} layout"
        if view.load_state == "loading":
            status += " · updating year view…"
        elif view.load_state == "error":
            status += " · could not load the full year, showing recent entries"
        self.query_one("#progress-status", Static).update(status)

    @work(exclusive=True, group="year")
    async def _change_year(self, offset: int) -> None:
        if self.dashboard is None:
            return
        view = self.dashboard.progress
        if offset < 0:
            await view.previous_year()
        else:
            await view.next_year()
        self._render_progress()

    def action_toggle_progress(self) -> None:
        showing = self.current_view == "today"
        self.query_one("#today-pane").display = not showing
        self.query_one("#progress-pane").display = showing
        self.current_view = "progress" if showing else "today"
        if showing:
            self._render_progress()

    def action_toggle_layout(self) -> None:
        if self.dashboard is None:
            return
        view = self.dashboard.progress
        view.set_layout("week" if view.layout == "month" else "month")
        self._render_progress()

    def action_prev_year(self) -> None:
        self._change_year(-1)

    def action_next_year(self) -> None:
        self._change_year(1)

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_quit_app(self) -> None:
        if self.dashboard is not None:
            self.dashboard.today.unmount()
            self.dashboard.progress.unmount()
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set DAILYWINS_ROOT to a directory holding wins.yaml and journals.json.")
        sys.exit(1)

    logging.basicConfig(
        filename=str(root / "dailywins.log"),
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = DailyWinsApp()
    app.run()


if __name__ == "__main__":
    main()
