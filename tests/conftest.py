from datetime import date

import pytest

from availability_calendar.window import VisibleWindow


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "DEFAULT_TITLE",
        "DEFAULT_STATUS",
        "STATUS_COLOR_ROLES_JSON",
        "FEED_TIMEZONE",
        "SNAPSHOT_SOURCE",
        "OUTPUT_JSON",
        "OUTPUT_JS",
        "CALENDAR_START",
        "CALENDAR_MONTHS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def august():
    return VisibleWindow(date(2024, 8, 1), date(2024, 8, 31))


def event(uid, start, end, **extra):
    data = {"uid": uid, "summary": extra.pop("summary", f"Guest {uid}"), "start": start, "end": end}
    data.update(extra)
    return data
