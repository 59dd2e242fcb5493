"""Typed dataclasses for the DailyWins data model.

All persisted models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing optional keys use defaults.
Records whose required fields are missing or mistyped raise ParseFailure.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any

from dailywins.daykey import day_start, derive_day_key
from dailywins.errors import ParseFailure, ValidationFailure

RATING_MIN = 1
RATING_MAX = 5


def validate_rating(rating: Any) -> int | None:
    """Return *rating* if it is absent or an integer in 1-5, else raise."""
    if rating is None:
        return None
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationFailure(f"Rating must be an integer, got {rating!r}")
    if not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationFailure(f"Rating must be between {RATING_MIN} and {RATING_MAX}, got {rating}")
    return rating


def _as_id(value: Any, what: str) -> int:
    if isinstance(value, dict):
        value = value.get("id")
    if isinstance(value, bool) or not isinstance(value, int):
        try:
            return int(str(value))
        except ValueError:
            raise ParseFailure(f"{what}: expected integer id, got {value!r}") from None
    return value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


# ── Configuration ─────────────────────────────────────────────


@dataclass
class Settings:
    timezone: str = "UTC"
    streak_lookback_days: int = 60
    recent_journal_limit: int = 60
    year_journal_limit: int = 366
    tracked_item_limit: int = 200

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        try:
            return cls(
                timezone=str(d.get("timezone", "UTC")),
                streak_lookback_days=int(d.get("streak_lookback_days", 60)),
                recent_journal_limit=int(d.get("recent_journal_limit", 60)),
                year_journal_limit=int(d.get("year_journal_limit", 366)),
                tracked_item_limit=int(d.get("tracked_item_limit", 200)),
            )
        except (TypeError, ValueError) as e:
            raise ParseFailure(f"Settings are malformed: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "streak_lookback_days": self.streak_lookback_days,
            "recent_journal_limit": self.recent_journal_limit,
            "year_journal_limit": self.year_journal_limit,
            "tracked_item_limit": self.tracked_item_limit,
        }


# ── Tracked items ─────────────────────────────────────────────


@dataclass
class TrackedItem:
    """A recurring goal ("win") a journal record can mark completed."""

    id: int
    name: str
    description: str | None = None
    active: bool = True
    order: int = 0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TrackedItem:
        if not isinstance(d, dict) or "id" not in d or not d.get("name"):
            raise ParseFailure(f"Tracked item needs id and name: {d!r}")
        try:
            order = int(d.get("order", d.get("_order", 0)) or 0)
        except (TypeError, ValueError):
            raise ParseFailure(f"Tracked item order must be an integer: {d!r}") from None
        return cls(
            id=_as_id(d["id"], "tracked item"),
            name=str(d["name"]),
            description=_optional_str(d.get("description")),
            active=d.get("active") is not False,
            order=order,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.description:
            d["description"] = self.description
        d["active"] = self.active
        d["order"] = self.order
        return d


# ── Journal records ───────────────────────────────────────────


@dataclass
class WinEntry:
    item_id: int
    completed: bool = False
    note: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WinEntry:
        if not isinstance(d, dict) or d.get("win") is None:
            raise ParseFailure(f"Win entry needs a win reference: {d!r}")
        return cls(
            item_id=_as_id(d["win"], "win entry"),
            completed=bool(d.get("completed", False)),
            note=_optional_str(d.get("note")),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"win": self.item_id, "completed": self.completed}
        if self.note:
            d["note"] = self.note
        return d


@dataclass
class JournalRecord:
    """One day's logged entry. ``id`` is None until the store assigns one."""

    day_key: str
    id: int | None = None
    rating: int | None = None
    text: str | None = None
    wins: list[WinEntry] = field(default_factory=list)

    def completed_item_ids(self) -> set[int]:
        return {w.item_id for w in self.wins if w.completed}

    def has_completed(self, item_id: int) -> bool:
        return any(w.item_id == item_id and w.completed for w in self.wins)

    @classmethod
    def from_dict(cls, d: dict[str, Any], tz: tzinfo | None = None) -> JournalRecord:
        """Parse a stored/transported record.

        The day key comes from ``dayKey`` when present, otherwise it is
        derived from the ``date`` instant in *tz*.
        """
        if not isinstance(d, dict):
            raise ParseFailure(f"Journal record must be an object, got {type(d).__name__}")
        key = d.get("dayKey")
        try:
            if not key:
                if not d.get("date"):
                    raise ParseFailure(f"Journal record has no date: {d!r}")
                key = derive_day_key(d["date"], tz)
            rating = validate_rating(d.get("rating"))
        except (ValueError, TypeError, ValidationFailure) as e:
            raise ParseFailure(f"Journal record is malformed: {e}") from e
        wins_raw = d.get("wins") or []
        if not isinstance(wins_raw, list):
            raise ParseFailure("Journal record wins must be a list")
        return cls(
            day_key=str(key),
            id=_as_id(d["id"], "journal") if d.get("id") is not None else None,
            rating=rating,
            text=_optional_str(d.get("journal")),
            wins=[WinEntry.from_dict(w) for w in wins_raw],
        )

    def to_dict(self, tz: tzinfo | None = None) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "dayKey": self.day_key,
            "date": day_start(self.day_key, tz).isoformat(),
            "rating": self.rating,
            "journal": self.text,
            "wins": [w.to_dict() for w in self.wins],
        }
        return d


# ── Derived day state ─────────────────────────────────────────


MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class DayStatus(enum.Enum):
    MISSING = "missing"
    UNRATED = "unrated"
    RATED = "rated"


@dataclass(frozen=True)
class DayState:
    key: str
    status: DayStatus
    rating: int | None = None

    @property
    def state_class(self) -> str:
        if self.status is DayStatus.RATED:
            return f"rating-{self.rating}"
        return f"is-{self.status.value}"

    @property
    def label(self) -> str:
        month = MONTH_LABELS[int(self.key[5:7]) - 1]
        day = int(self.key[8:10])
        if self.status is DayStatus.RATED:
            return f"{month} {day}: {self.rating}/5"
        if self.status is DayStatus.UNRATED:
            return f"{month} {day}: journal, no rating"
        return f"{month} {day}: no entry"

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "status": self.status.value,
            "rating": self.rating,
            "stateClass": self.state_class,
            "label": self.label,
        }
