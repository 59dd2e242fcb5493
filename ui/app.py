from __future__ import annotations

import logging
import os
import secrets
from datetime import datetime, tzinfo
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from dailywins import (
    Dashboard,
    DailyWinsError,
    FileJournalStore,
    JournalRecord,
    ParseFailure,
    ProgressView,
    RecordNotFound,
    TransportFailure,
    ValidationFailure,
    day_start,
    get_user_timezone,
    load_settings,
    parse_day_key,
    today_key,
    workspace_root,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="DailyWins API", version="0.1.0")

security = HTTPBasic(auto_error=False)

ERROR_STATUS: dict[type[DailyWinsError], int] = {
    ValidationFailure: status.HTTP_400_BAD_REQUEST,
    RecordNotFound: status.HTTP_404_NOT_FOUND,
    ParseFailure: status.HTTP_502_BAD_GATEWAY,
    TransportFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(DailyWinsError)
async def dailywins_error_handler(request: Request, exc: DailyWinsError) -> JSONResponse:
    code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})


# ── Auth ──────────────────────────────────────────────────────

def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("DAILYWINS_USERNAME", "")
    expected_password = os.environ.get("DAILYWINS_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def get_store() -> FileJournalStore:
    return FileJournalStore(workspace_root())


# ── Request parsing ───────────────────────────────────────────

def _parse_instant(value: str, tz: tzinfo) -> datetime:
    """Accept a day key (local midnight) or an ISO timestamp."""
    value = value.strip()
    if len(value) == 10:
        return day_start(parse_day_key(value).isoformat(), tz)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationFailure(f"Invalid date: {value!r}") from None
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=tz)


def _record_from_payload(payload: dict[str, Any], tz: tzinfo, record_id: int | None = None) -> JournalRecord:
    body = dict(payload)
    body.pop("id", None)
    try:
        record = JournalRecord.from_dict(body, tz)
    except ParseFailure as e:
        raise ValidationFailure(str(e)) from e
    parse_day_key(record.day_key)
    record.id = record_id
    return record


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/wins")
async def api_list_wins(
    active_only: bool = False,
    sort: str = "order",
    limit: int | None = None,
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    items = await store.fetch_tracked_items(active_only=active_only, sort=sort, limit=limit)
    return {"docs": [i.to_dict() for i in items]}


@app.post("/api/wins")
async def api_create_win(
    payload: dict[str, Any] = Body(...),
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    item = await store.create_tracked_item(
        name=str(payload.get("name", "")),
        description=payload.get("description"),
        active=payload.get("active") is not False,
    )
    return {"doc": item.to_dict()}


@app.patch("/api/wins/{item_id}")
async def api_update_win(
    item_id: int,
    payload: dict[str, Any] = Body(...),
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    item = await store.update_tracked_item(item_id, payload)
    return {"doc": item.to_dict()}


@app.get("/api/journals")
async def api_list_journals(
    start: str | None = None,
    end: str | None = None,
    sort: str = "-date",
    limit: int | None = None,
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Journals in ``[start, end)``; without a range, the most recent ones."""
    if start is None and end is None:
        if limit is None:
            limit = load_settings(store.root).recent_journal_limit
        records = await store.fetch_recent_journals(sort=sort, limit=limit)
    else:
        if start is None or end is None:
            raise ValidationFailure("Both start and end are required for a range query")
        records = await store.fetch_journals_in_range(
            _parse_instant(start, store.tz), _parse_instant(end, store.tz), sort=sort, limit=limit
        )
    return {"docs": [r.to_dict(store.tz) for r in records]}


@app.get("/api/journals/day/{day_key}")
async def api_journal_for_day(
    day_key: str,
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    key = parse_day_key(day_key).isoformat()
    record = await store.fetch_journal_by_day_key(key)
    return {"doc": record.to_dict(store.tz) if record else None}


@app.post("/api/journals")
async def api_create_journal(
    payload: dict[str, Any] = Body(...),
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    record = _record_from_payload(payload, store.tz)
    saved = await store.save_journal(record, is_update=False)
    return {"doc": saved.to_dict(store.tz)}


@app.patch("/api/journals/{journal_id}")
async def api_update_journal(
    journal_id: int,
    payload: dict[str, Any] = Body(...),
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    record = _record_from_payload(payload, store.tz, record_id=journal_id)
    saved = await store.save_journal(record, is_update=True)
    return {"doc": saved.to_dict(store.tz)}


@app.get("/api/today")
async def api_today(
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Today's record with the overall and per-win streaks."""
    settings = load_settings(store.root)
    tz = get_user_timezone(settings=settings)
    dashboard = Dashboard(store, today_key(store.root), settings, tz)
    if not await dashboard.refresh_all():
        raise dashboard.error
    return dashboard.today_data.to_dict()


@app.get("/api/progress/{year}")
async def api_progress(
    year: int,
    layout: str = "month",
    store: FileJournalStore = Depends(get_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Per-day classification for a year, as month rows or a week grid."""
    settings = load_settings(store.root)
    current_year = int(today_key(store.root)[:4])
    if year > current_year:
        raise ValidationFailure(f"Year {year} is in the future")
    view = ProgressView(store, current_year, tz=store.tz, year_limit=settings.year_journal_limit)
    try:
        view.set_layout(layout)
    except ValueError as e:
        raise ValidationFailure(str(e)) from e
    if not await view.load_year(year):
        raise view.error

    result: dict[str, Any] = {"year": year, "layout": view.layout}
    if view.layout == "month":
        result["months"] = [
            {"label": label, "days": [d.to_dict() for d in days]}
            for label, days in view.month_rows()
        ]
    else:
        result["cells"] = [c.to_dict() if c else None for c in view.week_cells()]
    return result
