"""Drawable primitives for one day cell.

Edges are fractions of the cell width: a stay arrives in the middle of its
check-in cell and leaves in the middle of its checkout cell.
"""
from . import config
from .classify import Role
from .dates import format_day

BAR_EDGES = {
    Role.CHECK_IN: (0.5, 1.0),
    Role.MID_STAY: (0.0, 1.0),
    Role.CHECK_OUT: (0.0, 0.5),
    Role.CHECK_IN_AND_OUT: (0.35, 0.65),
}

SHORT_ID_LENGTH = 8


def status_color_role(interval):
    if interval.kind == "closed":
        return "closed"
    status = (interval.status or "").strip().lower()
    return config.status_color_roles().get(status, "default")


def default_color_rule(interval, role, lane, turnover):
    base = status_color_role(interval)
    if turnover and role is Role.CHECK_OUT:
        return f"{base}:outgoing"
    if turnover and role is Role.CHECK_IN:
        return f"{base}:incoming"
    return base


def format_range(interval):
    # Guests see the nights they stay, never the departure morning.
    return f"{format_day(interval.start)} - {format_day(interval.last_occupied_night)}"


def build_tooltip(interval):
    return {
        "id": interval.id,
        "shortId": interval.id[:SHORT_ID_LENGTH],
        "title": interval.title,
        "status": interval.status,
        "formattedRange": format_range(interval),
        "nights": interval.nights,
        "checkoutDay": interval.checkout_day.isoformat(),
    }


def _points(role):
    if role is Role.CHECK_IN:
        return ("checkIn",)
    if role is Role.CHECK_OUT:
        return ("checkOut",)
    if role is Role.CHECK_IN_AND_OUT:
        return ("checkIn", "checkOut")
    return ()


def build_render_primitives(entries, lanes, turnover, color_rule=None):
    """Bars, boundary points and tooltips for one classified day.

    ``entries`` are ``(seq, interval, role)`` triples from the classifier and
    ``lanes`` maps ``seq`` to its lane.
    """
    color_rule = color_rule or default_color_rule
    bars = []
    points = []
    tooltips = []
    for seq, interval, role in entries:
        if role is Role.NONE:
            continue
        lane = lanes[seq]
        color_role = color_rule(interval, role, lane, turnover)
        left, right = BAR_EDGES[role]
        bars.append({"lane": lane, "leftEdge": left, "rightEdge": right, "colorRole": color_role})
        for position in _points(role):
            points.append({"lane": lane, "position": position, "colorRole": color_role})
        tooltips.append(dict(build_tooltip(interval), lane=lane))
    return {"bars": bars, "points": points, "tooltips": tooltips}
