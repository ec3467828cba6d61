from .classify import Role, classify_day, same_day_turnover
from .dates import checkout_day, last_occupied_night, normalize_to_calendar_day
from .errors import (
    CalendarLayoutError,
    EmptyWindowError,
    FeedError,
    InvalidDateError,
    MalformedIntervalError,
)
from .intervals import LayoutWarning, ReservationInterval, build_interval_index, interval_from_event
from .lanes import assign_lanes
from .layout import CalendarLayout, compute_calendar_layout, memoize_layout
from .render import build_render_primitives
from .window import VisibleWindow, default_window, expand_window

__version__ = "1.0.0"
