import json
import random
from datetime import date

import pytest

from availability_calendar import (
    EmptyWindowError,
    InvalidDateError,
    Role,
    compute_calendar_layout,
    memoize_layout,
)
from conftest import event

AUG_SEP = {"firstDay": "2024-08-01", "lastDay": "2024-09-30"}


def _roles(layout, day):
    cell = layout.cell(day)
    return {entry.interval.id: entry.role for entry in cell.entries}


def test_scenario_single_stay(august):
    layout = compute_calendar_layout([event("a", "2024-08-01", "2024-08-05")], august)

    assert _roles(layout, date(2024, 8, 1)) == {"a": Role.CHECK_IN}
    assert _roles(layout, date(2024, 8, 2)) == {"a": Role.MID_STAY}
    assert _roles(layout, date(2024, 8, 3)) == {"a": Role.MID_STAY}
    assert _roles(layout, date(2024, 8, 5)) == {"a": Role.CHECK_OUT}
    assert _roles(layout, date(2024, 8, 6)) == {}
    entry = layout.cell(date(2024, 8, 1)).entries[0]
    assert entry.interval.last_occupied_night == date(2024, 8, 4)


def test_single_night_touches_one_day(august):
    layout = compute_calendar_layout([event("a", "2024-08-10", "2024-08-11")], august)

    touched = sorted({cell.date for cell in layout.cells() if cell.entries})
    assert touched == [date(2024, 8, 10)]
    assert _roles(layout, date(2024, 8, 10)) == {"a": Role.CHECK_IN_AND_OUT}


def test_scenario_turnover(august):
    layout = compute_calendar_layout(
        [event("I2", "2024-08-05", "2024-08-08"), event("I1", "2024-08-01", "2024-08-05")],
        august,
    )
    cell = layout.cell(date(2024, 8, 5))

    assert cell.turnover is True
    assert _roles(layout, date(2024, 8, 5)) == {"I1": Role.CHECK_OUT, "I2": Role.CHECK_IN}
    assert [entry.lane for entry in cell.entries] == [0, 0]
    assert [bar["colorRole"] for bar in cell.primitives["bars"]] == ["confirmed:outgoing", "confirmed:incoming"]
    assert not layout.cell(date(2024, 8, 4)).turnover


def test_scenario_interval_outside_window():
    layout = compute_calendar_layout([event("july", "2024-07-02", "2024-07-09")], AUG_SEP)

    assert all(not cell.entries for cell in layout.cells())
    assert layout.warnings == ()


def test_scenario_malformed_interval_is_reported(august):
    layout = compute_calendar_layout(
        [event("bad", "2024-08-10", "2024-08-07"), event("good", "2024-08-01", "2024-08-03")],
        august,
    )

    assert len(layout.warnings) == 1
    assert layout.warnings[0].interval_id == "bad"
    assert _roles(layout, date(2024, 8, 1)) == {"good": Role.CHECK_IN}
    assert all(entry.interval.id != "bad" for cell in layout.cells() for entry in cell.entries)


def test_unparseable_dates_are_reported(august):
    layout = compute_calendar_layout([event("nan", float("nan"), "2024-08-03")], august)
    assert [warning.to_dict()["code"] for warning in layout.warnings] == ["invalid_date"]


def test_filler_days_are_classified():
    layout = compute_calendar_layout([event("edge", "2024-07-30", "2024-08-03")], AUG_SEP)
    filler = layout.months[0].weeks[0][2]

    assert filler.date == date(2024, 7, 30)
    assert filler.out_of_range
    assert [entry.role for entry in filler.entries] == [Role.CHECK_IN]


def test_layout_is_idempotent_and_order_independent(august):
    events = [
        event("a", "2024-08-01", "2024-08-06"),
        event("b", "2024-08-03", "2024-08-09"),
        event("c", "2024-08-06", "2024-08-07", status="tentative"),
        event("d", "2024-08-09", "2024-08-20"),
        event("d", "2024-08-09", "2024-08-20"),
    ]
    expected = json.dumps(compute_calendar_layout(events, august).to_dict(), sort_keys=True)

    assert json.dumps(compute_calendar_layout(events, august).to_dict(), sort_keys=True) == expected
    shuffled = list(events)
    random.Random(7).shuffle(shuffled)
    assert json.dumps(compute_calendar_layout(shuffled, august).to_dict(), sort_keys=True) == expected


def test_tooltips_never_show_the_checkout_night(august):
    layout = compute_calendar_layout([event("a", "2024-08-01", "2024-08-05")], august)
    for cell in layout.cells():
        for tooltip in cell.primitives["tooltips"]:
            assert tooltip["formattedRange"] == "Aug 1, 2024 - Aug 4, 2024"


def test_window_errors_propagate():
    with pytest.raises(EmptyWindowError):
        compute_calendar_layout([], {"firstDay": "2024-08-31", "lastDay": "2024-08-01"})
    with pytest.raises(InvalidDateError):
        compute_calendar_layout([], {"firstDay": "someday", "lastDay": "2024-08-01"})


def test_to_dict_shape(august):
    data = compute_calendar_layout([event("a", "2024-08-01", "2024-08-03")], august).to_dict()

    assert data["window"] == {"firstDay": "2024-08-01", "lastDay": "2024-08-31"}
    assert data["laneCount"] == 1
    month = data["months"][0]
    assert month["heading"] == "August 2024"
    assert month["weekdays"][0] == "Sun"
    first = month["weeks"][0][4]
    assert first["date"] == "2024-08-01"
    assert first["intervals"] == [{"id": "a", "role": "CHECK_IN", "lane": 0}]
    assert first["points"] == [{"lane": 0, "position": "checkIn", "colorRole": "confirmed"}]


def test_memoize_layout_reuses_results(august):
    layout = memoize_layout(maxsize=1)
    events = [event("a", "2024-08-01", "2024-08-03")]

    first = layout(events, august)
    assert layout([dict(e) for e in events], august) is first

    other = layout(events, {"firstDay": "2024-08-01", "lastDay": "2024-08-15"})
    assert other is not first
    assert len(layout.cache) == 1


def test_lane_for_reports_first_occurrence(august):
    layout = compute_calendar_layout(
        [
            event("a", "2024-08-01", "2024-08-05"),
            event("b", "2024-08-03", "2024-08-07"),
            event("b", "2024-08-03", "2024-08-07"),
        ],
        august,
    )

    assert layout.lane_for("a") == 0
    assert layout.lane_for("b") == 1
    assert layout.lane_for("missing") is None
    assert layout.lane_count == 3
