"""DailyWins core library: day keys, streaks, calendar grids and journal flows.

Public API re-exports for convenient imports:
    from dailywins import JournalIndex, compute_overall_streak, reconcile, ...
"""

# Errors
from dailywins.errors import (
    DailyWinsError,
    TransportFailure,
    ParseFailure,
    ValidationFailure,
    RecordNotFound,
)

# Day keys
from dailywins.daykey import (
    derive_day_key,
    make_day_key,
    parse_day_key,
    shift_day_key,
    weekday_index,
    day_start,
    day_range,
    year_range,
)

# Models
from dailywins.models import (
    Settings,
    TrackedItem,
    WinEntry,
    JournalRecord,
    DayStatus,
    DayState,
    validate_rating,
)

# Workspace
from dailywins.workspace import (
    workspace_root,
    load_settings,
    get_user_timezone,
    now_local,
    today_key,
)

# Engines
from dailywins.index import JournalIndex
from dailywins.streaks import (
    compute_overall_streak,
    compute_item_streak,
    compute_item_streaks,
)
from dailywins.grid import (
    classify_day,
    build_month_grid,
    build_week_grid,
    build_year_grid,
)
from dailywins.reconcile import reconcile, apply_saved_record
from dailywins.snapshot import (
    WinEntryState,
    build_wins_state,
    snapshot,
    is_dirty,
    can_save,
    build_record,
)

# Collaborator & flows
from dailywins.store import JournalStore, FileJournalStore
from dailywins.today import TodayData, TodayView, build_today_data
from dailywins.progress import ProgressView
from dailywins.dashboard import Dashboard
