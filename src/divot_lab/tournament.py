"""
Tournament resolution: which event is "current" and where it is in its lifecycle.

Events are treated as four-day tournaments (start through start + 3 days).
An event stays on display for one grace day after its final round so the
results remain visible before the schedule rolls forward.
"""
from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from . import payloads
from .models import FieldSnapshot, Label, Phase, ScheduleEntry, TournamentInfo, parse_iso_date
from .roster import normalize_players

logger = logging.getLogger(__name__)

EVENT_DAYS = 4
GRACE_DAYS = 1
DEFAULT_EVENT_NAME = "Upcoming Tournament"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def end_date(start: date) -> date:
    return start + timedelta(days=EVENT_DAYS - 1)


def _today(today: Optional[date]) -> date:
    return today or date.today()


# ──────────────────────────────────────────────
# Payload parsing
# ──────────────────────────────────────────────

def parse_schedule(payload: Any) -> list[ScheduleEntry]:
    """Unwrap a schedule payload into entries. Malformed rows are skipped."""
    entries: list[ScheduleEntry] = []
    for raw in payloads.first_list(payload, payloads.SCHEDULE_LIST):
        if not isinstance(raw, dict):
            continue
        start = payloads.first_present(raw, payloads.SCHEDULE_START, expect=str)
        try:
            entries.append(
                ScheduleEntry(
                    event_name=raw.get("event_name") or "",
                    course=raw.get("course") or "",
                    start_date=start,
                    event_id=raw.get("event_id"),
                )
            )
        except ValidationError:
            logger.debug("Skipping malformed schedule row: %r", raw)
    return entries


def parse_field_snapshot(payload: Any) -> FieldSnapshot:
    """Unwrap a field-updates payload. Missing pieces become empty defaults."""
    body = payloads.first_dict(payload, payloads.FIELD_BODY) or {}
    current_round = body.get("current_round")
    if isinstance(current_round, bool) or not isinstance(current_round, (int, float, str)):
        current_round = None
    else:
        try:
            current_round = int(current_round)
        except (TypeError, ValueError):
            current_round = None

    event_name = body.get("event_name")
    return FieldSnapshot(
        event_name=event_name if isinstance(event_name, str) and event_name else None,
        course=body.get("course") if isinstance(body.get("course"), str) else "",
        current_round=current_round,
        event_completed=bool(body.get("event_completed")),
        field=normalize_players(payloads.first_list(body, payloads.FIELD_LIST)),
    )


# ──────────────────────────────────────────────
# Resolution
# ──────────────────────────────────────────────

def _candidate_still_showing(entry: ScheduleEntry, today: date) -> bool:
    start = entry.parsed_start()
    if start is None:
        return False
    if today < start:
        return True
    end = end_date(start)
    if today <= end:
        return True
    return today <= end + timedelta(days=GRACE_DAYS)


def select_event(
    schedule: Sequence[ScheduleEntry],
    current_field_event_name: Optional[str],
    today: Optional[date] = None,
) -> Optional[ScheduleEntry]:
    """
    Pick the event to display.

    1. The field feed's event, if it is upcoming, in progress, or in its grace day.
    2. Otherwise the earliest event starting today or later.
    3. Otherwise the last entry of the schedule, even if it is in the past.
    """
    if not schedule:
        return None
    today = _today(today)

    if current_field_event_name:
        for entry in schedule:
            if entry.event_name == current_field_event_name:
                if _candidate_still_showing(entry, today):
                    return entry
                logger.debug("Field event %r is stale; scanning schedule", entry.event_name)
                break

    upcoming: Optional[ScheduleEntry] = None
    upcoming_start: Optional[date] = None
    for entry in schedule:
        start = entry.parsed_start()
        if start is None or start < today:
            continue
        # Strict comparison keeps the first of equal dates
        if upcoming_start is None or start < upcoming_start:
            upcoming, upcoming_start = entry, start
    if upcoming is not None:
        return upcoming

    return schedule[-1]


def phase(snapshot: Optional[FieldSnapshot]) -> Phase:
    if snapshot is None:
        return "pre"
    return snapshot.phase


def compute_label(
    selected: Optional[ScheduleEntry],
    snapshot: Optional[FieldSnapshot],
    today: Optional[date] = None,
) -> Optional[Label]:
    """UPCOMING before the start date, LIVE while rounds are in progress, else None."""
    if selected is not None:
        start = selected.parsed_start()
        if start is not None and start > _today(today):
            return "UPCOMING"
    if phase(snapshot) == "live":
        return "LIVE"
    return None


def resolve_tournament(
    schedule: Sequence[ScheduleEntry],
    snapshot: Optional[FieldSnapshot],
    today: Optional[date] = None,
) -> TournamentInfo:
    snapshot = snapshot or FieldSnapshot()
    selected = select_event(schedule, snapshot.event_name, today)

    if selected is not None:
        event_name = selected.event_name or snapshot.event_name or DEFAULT_EVENT_NAME
        course = selected.course or snapshot.course
        start_date = selected.start_date
    else:
        event_name = snapshot.event_name or DEFAULT_EVENT_NAME
        course = snapshot.course
        start_date = None

    # Field size only describes the selected event when the feed agrees on it
    same_event = selected is None or selected.event_name == snapshot.event_name
    return TournamentInfo(
        event_name=event_name,
        course=course,
        start_date=start_date,
        label=compute_label(selected, snapshot, today),
        phase=snapshot.phase,
        current_round=snapshot.current_round,
        field_size=len(snapshot.field) if same_event else 0,
    )


# ──────────────────────────────────────────────
# Display helpers
# ──────────────────────────────────────────────

def _normalize_event_name(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


def event_names_match(a: Optional[str], b: Optional[str]) -> bool:
    """Loose event-name comparison; the in-play feed can lag a week behind."""
    na = _normalize_event_name(a or "")
    nb = _normalize_event_name(b or "")
    if not na or not nb:
        return False
    return na == nb or na in nb or nb in na


def format_tournament_date(start: Optional[str], end: Optional[str] = None) -> str:
    """'Feb 12', 'Feb 12–15' or 'Feb 26 – Mar 1'."""
    start_d = parse_iso_date(start)
    if start_d is None:
        return ""
    text = f"{_MONTHS[start_d.month - 1]} {start_d.day}"
    end_d = parse_iso_date(end)
    if end_d is None:
        return text
    if end_d.month == start_d.month:
        return f"{text}–{end_d.day}"
    return f"{text} – {_MONTHS[end_d.month - 1]} {end_d.day}"


def upcoming_date_label(start: Optional[str], today: Optional[date] = None) -> str:
    start_d = parse_iso_date(start)
    if start_d is None:
        return "Date TBD"
    date_range = format_tournament_date(start, end_date(start_d).isoformat())
    days = (start_d - _today(today)).days
    if days <= 0:
        return f"Starts today · {date_range}"
    if days == 1:
        return f"Starts tomorrow · {date_range}"
    if days <= 7:
        return f"Starts in {days} days · {date_range}"
    return date_range
