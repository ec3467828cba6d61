class CalendarLayoutError(ValueError):
    code = "layout_error"


class InvalidDateError(CalendarLayoutError):
    code = "invalid_date"


class EmptyWindowError(CalendarLayoutError):
    code = "empty_window"


class MalformedIntervalError(CalendarLayoutError):
    code = "malformed_interval"


class FeedError(RuntimeError):
    pass
