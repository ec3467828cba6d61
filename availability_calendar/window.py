import calendar
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date

from .dates import add_months, iter_months, month_end, month_start, normalize_to_calendar_day
from .errors import EmptyWindowError

WEEKDAY_HEADINGS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
_SUNDAY_FIRST = calendar.Calendar(firstweekday=6)


@dataclass(frozen=True)
class VisibleWindow:
    first_day: date
    last_day: date

    def __post_init__(self):
        if self.last_day < self.first_day:
            raise EmptyWindowError(
                f"Window ends {self.last_day.isoformat()} before it starts {self.first_day.isoformat()}"
            )

    def __contains__(self, day):
        return self.first_day <= day <= self.last_day

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            first = value.get("firstDay", value.get("first_day"))
            last = value.get("lastDay", value.get("last_day"))
        else:
            try:
                first, last = value
            except (TypeError, ValueError) as exc:
                raise EmptyWindowError(f"Cannot read a window from {value!r}") from exc
        return cls(normalize_to_calendar_day(first), normalize_to_calendar_day(last))

    def to_dict(self):
        return {"firstDay": self.first_day.isoformat(), "lastDay": self.last_day.isoformat()}


@dataclass(frozen=True)
class GridDay:
    date: date
    in_window: bool
    out_of_range: bool


@dataclass(frozen=True)
class MonthGroup:
    year: int
    month: int
    weeks: tuple

    @property
    def heading(self):
        return f"{calendar.month_name[self.month]} {self.year}"


def default_window(today, months=3):
    first = month_start(today)
    return VisibleWindow(first, month_end(add_months(first, months - 1)))


def expand_window(window):
    """Month groups of Sunday-first weeks covering ``window``.

    Leading and trailing days that complete a week row but fall outside the
    month or the window are marked ``out_of_range``.
    """
    window = VisibleWindow.coerce(window)
    groups = []
    for cursor in iter_months(window.first_day, window.last_day):
        weeks = []
        for week in _SUNDAY_FIRST.monthdatescalendar(cursor.year, cursor.month):
            in_month = [day for day in week if day.month == cursor.month and day in window]
            if not in_month:
                continue
            weeks.append(
                tuple(
                    GridDay(
                        date=day,
                        in_window=day in window,
                        out_of_range=not (day.month == cursor.month and day in window),
                    )
                    for day in week
                )
            )
        groups.append(MonthGroup(year=cursor.year, month=cursor.month, weeks=tuple(weeks)))
    return tuple(groups)


def grid_days(groups):
    return sorted({cell.date for group in groups for week in group.weeks for cell in week})
