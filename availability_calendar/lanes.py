"""Visual lane allocation.

Lanes are handed out while scanning days in order, keyed by the interval's
position in the canonical order of the index, so the same inputs always
produce the same lanes regardless of feed order. A lane is held while the
stay still occupies a night; on its checkout morning the lane is free for
an arriving stay, which then starts mid-cell where the departing bar ends.
"""


def _lowest_free(taken):
    lane = 0
    while lane in taken:
        lane += 1
    return lane


def assign_lanes(index, days=None):
    """Return ``{seq: lane}`` for every interval in ``index``."""
    if days is None:
        days = sorted(index.days)

    lanes = {}
    held = {}
    for day in days:
        departing = set()
        for seq in [seq for seq in held if index.intervals[seq].end <= day]:
            departing.add(held.pop(seq))

        for seq in index.days.get(day, ()):
            if seq in lanes:
                continue
            interval = index.intervals[seq]
            taken = set(held.values())
            if day != interval.start or interval.is_single_night:
                # Only a check-in bar starts mid-cell; every other bar covers the morning.
                taken |= departing
            lane = _lowest_free(taken)
            lanes[seq] = lane
            if interval.end > day:
                held[seq] = lane
            else:
                departing.add(lane)
    return lanes


def lanes_by_id(index, lanes):
    """Lane of the first occurrence of each interval id."""
    result = {}
    for seq, interval in enumerate(index.intervals):
        if seq in lanes and interval.id not in result:
            result[interval.id] = lanes[seq]
    return result


def lane_count(lanes):
    return max(lanes.values()) + 1 if lanes else 0
