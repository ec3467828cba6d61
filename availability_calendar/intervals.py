"""Reservation intervals and the per-day interval index."""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from . import config
from .dates import checkout_day, iter_days, last_occupied_night, normalize_to_calendar_day
from .errors import CalendarLayoutError, InvalidDateError, MalformedIntervalError

LOG = logging.getLogger(__name__)

CLOSED_SUMMARY = "closed period"
CLOSED_TITLE = "Owner Block"


@dataclass(frozen=True)
class ReservationInterval:
    """A stay from ``start`` (inclusive) to ``end`` (exclusive, iCal style)."""

    id: str
    title: str
    start: date
    end: date
    status: Optional[str] = None
    kind: str = "reservation"

    def __post_init__(self):
        for name in ("start", "end"):
            value = getattr(self, name)
            if isinstance(value, datetime) or not isinstance(value, date):
                raise InvalidDateError(f"Interval {self.id}: {name} is not a calendar day: {value!r}")
        if self.end <= self.start:
            raise MalformedIntervalError(
                f"Interval {self.id}: end {self.end.isoformat()} is not after start {self.start.isoformat()}"
            )

    @property
    def last_occupied_night(self):
        return last_occupied_night(self.end)

    @property
    def checkout_day(self):
        return checkout_day(self.end)

    @property
    def nights(self):
        return (self.end - self.start).days

    @property
    def is_single_night(self):
        return self.nights == 1

    @property
    def last_touched_day(self):
        # A one-night stay folds its checkout into the check-in cell.
        return self.start if self.is_single_night else self.end

    def touches(self, day):
        if self.start <= day < self.end:
            return True
        return day == self.start or (day == self.end and not self.is_single_night)

    def sort_key(self):
        return (self.start, self.id, self.end, self.title, self.status or "", self.kind)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "lastOccupiedNight": self.last_occupied_night.isoformat(),
            "checkoutDay": self.checkout_day.isoformat(),
            "status": self.status,
            "kind": self.kind,
        }


@dataclass(frozen=True)
class LayoutWarning:
    interval_id: str
    code: str
    message: str

    def to_dict(self):
        return {"intervalId": self.interval_id, "code": self.code, "message": self.message}


def _first(event, *keys):
    for key in keys:
        value = event.get(key)
        if value not in (None, ""):
            return value
    return None


def interval_from_event(event):
    """Validate a feed event (mapping) into a ``ReservationInterval``."""
    if isinstance(event, ReservationInterval):
        return event
    if not isinstance(event, Mapping):
        raise MalformedIntervalError(f"Unsupported event type {type(event).__name__}")

    event_id = _first(event, "id", "uid")
    if event_id is None:
        raise MalformedIntervalError("Event has no id")
    event_id = str(event_id).strip()

    start_raw = _first(event, "start", "dtstart")
    end_raw = _first(event, "end", "dtend")
    try:
        start = normalize_to_calendar_day(start_raw)
        end = normalize_to_calendar_day(end_raw)
    except InvalidDateError as exc:
        raise InvalidDateError(f"Interval {event_id}: {exc}") from exc

    summary = str(_first(event, "title", "summary") or "").strip()
    event_type = str(event.get("type") or "").strip().lower()
    kind = "closed" if event_type == "closed" or summary.lower() == CLOSED_SUMMARY else "reservation"
    title = summary or (CLOSED_TITLE if kind == "closed" else config.default_title())
    status = str(_first(event, "status") or config.default_status()).strip()

    return ReservationInterval(
        id=event_id,
        title=title,
        start=start,
        end=end,
        status=status,
        kind=kind,
    )


def _event_label(event):
    if isinstance(event, ReservationInterval):
        return event.id
    if isinstance(event, Mapping):
        value = _first(event, "id", "uid")
        if value is not None:
            return str(value)
    return "unknown"


@dataclass(frozen=True)
class IntervalIndex:
    """Intervals touching each indexed day.

    ``intervals`` is in canonical ``(start, id, ...)`` order; ``days`` maps a
    day to positions into ``intervals`` in that same order.
    """

    intervals: tuple
    days: dict
    warnings: tuple

    def touching(self, day):
        return tuple((seq, self.intervals[seq]) for seq in self.days.get(day, ()))


def normalize_intervals(events):
    accepted = []
    warnings = []
    for event in events:
        try:
            accepted.append(interval_from_event(event))
        except CalendarLayoutError as exc:
            label = _event_label(event)
            LOG.warning("Skipping interval %s: %s", label, exc)
            warnings.append(LayoutWarning(label, exc.code, str(exc)))
    accepted.sort(key=ReservationInterval.sort_key)
    return accepted, warnings


def build_interval_index(events, window, indexed_days=None):
    """Bucket ``events`` into the days they touch.

    Intervals that touch no day of ``window`` are dropped silently. Malformed
    events are dropped with a ``LayoutWarning``. ``indexed_days`` defaults to
    the days of the window; pass the full week-grid days to classify filler
    days as well.
    """
    accepted, warnings = normalize_intervals(events)
    visible = [
        interval
        for interval in accepted
        if interval.start <= window.last_day and interval.last_touched_day >= window.first_day
    ]

    if indexed_days is None:
        indexed_days = list(iter_days(window.first_day, window.last_day))
    days = {day: [] for day in indexed_days}
    if not days:
        return IntervalIndex(intervals=tuple(visible), days={}, warnings=tuple(warnings))
    first_indexed, last_indexed = min(days), max(days)

    for seq, interval in enumerate(visible):
        cursor = max(interval.start, first_indexed)
        last = min(interval.last_touched_day, last_indexed)
        while cursor <= last:
            bucket = days.get(cursor)
            if bucket is not None:
                bucket.append(seq)
            cursor += timedelta(days=1)

    return IntervalIndex(
        intervals=tuple(visible),
        days={day: tuple(seqs) for day, seqs in days.items()},
        warnings=tuple(warnings),
    )
