from enum import Enum


class Role(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
    MID_STAY = "MID_STAY"
    CHECK_IN_AND_OUT = "CHECK_IN_AND_OUT"
    NONE = "NONE"


def classify_day(day, interval):
    """Role of ``interval`` on ``day``; depends only on the day and the interval's dates."""
    if not interval.touches(day):
        return Role.NONE
    if day == interval.start and day == interval.last_occupied_night:
        return Role.CHECK_IN_AND_OUT
    if day == interval.start:
        return Role.CHECK_IN
    if day == interval.checkout_day:
        return Role.CHECK_OUT
    if interval.start < day < interval.end:
        return Role.MID_STAY
    return Role.NONE


def same_day_turnover(classified):
    """True when one stay checks out and a different stay checks in.

    ``classified`` is an iterable of ``(interval, role)`` pairs for one day.
    """
    checkout_ids = set()
    checkin_ids = set()
    for interval, role in classified:
        if role is Role.CHECK_OUT:
            checkout_ids.add(interval.id)
        elif role is Role.CHECK_IN:
            checkin_ids.add(interval.id)
    return any(checkin_id != checkout_id for checkin_id in checkin_ids for checkout_id in checkout_ids)


def classify_touching(day, touching):
    """Classify the ``(seq, interval)`` pairs from ``IntervalIndex.touching``.

    Returns ``(entries, turnover)`` where entries are ``(seq, interval, role)``
    in index order.
    """
    entries = tuple((seq, interval, classify_day(day, interval)) for seq, interval in touching)
    turnover = same_day_turnover((interval, role) for _, interval, role in entries)
    return entries, turnover
