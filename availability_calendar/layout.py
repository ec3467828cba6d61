"""Calendar layout assembly: the engine's single public computation."""
import json
import logging
from collections import OrderedDict
from dataclasses import dataclass

from .classify import classify_touching
from .intervals import ReservationInterval, build_interval_index
from .lanes import assign_lanes, lane_count, lanes_by_id
from .render import build_render_primitives
from .window import WEEKDAY_HEADINGS, VisibleWindow, expand_window, grid_days

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayEntry:
    interval: ReservationInterval
    role: object
    lane: int

    def to_dict(self):
        return {"id": self.interval.id, "role": self.role.value, "lane": self.lane}


@dataclass(frozen=True)
class DayCell:
    date: object
    entries: tuple
    turnover: bool
    in_window: bool
    out_of_range: bool
    primitives: dict

    def to_dict(self):
        return {
            "date": self.date.isoformat(),
            "inWindow": self.in_window,
            "outOfRange": self.out_of_range,
            "turnover": self.turnover,
            "intervals": [entry.to_dict() for entry in self.entries],
            "bars": self.primitives["bars"],
            "points": self.primitives["points"],
            "tooltips": self.primitives["tooltips"],
        }


@dataclass(frozen=True)
class MonthLayout:
    year: int
    month: int
    heading: str
    weeks: tuple

    def to_dict(self):
        return {
            "heading": self.heading,
            "year": self.year,
            "month": self.month,
            "weekdays": list(WEEKDAY_HEADINGS),
            "weeks": [[cell.to_dict() for cell in week] for week in self.weeks],
        }


@dataclass(frozen=True)
class CalendarLayout:
    window: VisibleWindow
    months: tuple
    warnings: tuple
    lane_count: int
    lanes_by_id: dict

    def lane_for(self, interval_id):
        """Lane of the first occurrence of ``interval_id``, or ``None`` if it is not shown."""
        return self.lanes_by_id.get(interval_id)

    def cells(self):
        for month in self.months:
            for week in month.weeks:
                yield from week

    def cell(self, day):
        """The in-range cell for ``day``, or ``None`` when it is not shown."""
        fallback = None
        for cell in self.cells():
            if cell.date == day:
                if not cell.out_of_range:
                    return cell
                fallback = fallback or cell
        return fallback

    def to_dict(self):
        return {
            "window": self.window.to_dict(),
            "laneCount": self.lane_count,
            "months": [month.to_dict() for month in self.months],
            "warnings": [warning.to_dict() for warning in self.warnings],
        }


def compute_calendar_layout(intervals, window, color_rule=None):
    """Lay out ``intervals`` over ``window``.

    ``intervals`` may hold ``ReservationInterval`` objects or raw feed event
    mappings. Bad records are skipped and reported in ``warnings``; a bad
    window raises ``EmptyWindowError`` or ``InvalidDateError``.
    """
    window = VisibleWindow.coerce(window)
    groups = expand_window(window)
    days = grid_days(groups)

    index = build_interval_index(intervals, window, indexed_days=days)
    lanes = assign_lanes(index, days)

    computed = {}
    for day in days:
        entries, turnover = classify_touching(day, index.touching(day))
        primitives = build_render_primitives(entries, lanes, turnover, color_rule)
        computed[day] = (
            tuple(DayEntry(interval, role, lanes[seq]) for seq, interval, role in entries),
            turnover,
            primitives,
        )

    months = []
    for group in groups:
        weeks = []
        for week in group.weeks:
            row = []
            for grid_day in week:
                entries, turnover, primitives = computed[grid_day.date]
                row.append(
                    DayCell(
                        date=grid_day.date,
                        entries=entries,
                        turnover=turnover,
                        in_window=grid_day.in_window,
                        out_of_range=grid_day.out_of_range,
                        primitives=primitives,
                    )
                )
            weeks.append(tuple(row))
        months.append(MonthLayout(group.year, group.month, group.heading, tuple(weeks)))

    if index.warnings:
        LOG.warning("Excluded %s malformed intervals from layout", len(index.warnings))
    return CalendarLayout(
        window=window,
        months=tuple(months),
        warnings=index.warnings,
        lane_count=lane_count(lanes),
        lanes_by_id=lanes_by_id(index, lanes),
    )


def _interval_key(interval):
    if isinstance(interval, ReservationInterval):
        return json.dumps(interval.to_dict(), sort_keys=True)
    return json.dumps(interval, sort_keys=True, default=str)


def layout_cache_key(intervals, window):
    window = VisibleWindow.coerce(window)
    return (tuple(_interval_key(interval) for interval in intervals), window)


def memoize_layout(maxsize=32):
    """A caller-owned memoizing wrapper around ``compute_calendar_layout``."""
    cache = OrderedDict()

    def cached(intervals, window, color_rule=None):
        intervals = list(intervals)
        key = (layout_cache_key(intervals, window), color_rule)
        if key in cache:
            cache.move_to_end(key)
            return cache[key]
        result = compute_calendar_layout(intervals, window, color_rule)
        cache[key] = result
        if len(cache) > maxsize:
            cache.popitem(last=False)
        return result

    cached.cache = cache
    return cached
