import json
import os
from datetime import date, datetime, timezone

from . import config
from .dates import normalize_to_calendar_day
from .errors import FeedError, InvalidDateError
from .feed import SnapshotFeed
from .layout import compute_calendar_layout
from .window import default_window


def _window_start(log):
    raw = config.calendar_start()
    if not raw or raw.lower() == "today":
        return date.today()
    try:
        return normalize_to_calendar_day(raw)
    except InvalidDateError as exc:
        log.warning("Ignoring CALENDAR_START=%s: %s", raw, exc)
        return date.today()


def build_layouts(feed, window):
    properties = []
    warning_count = 0
    for name in feed.property_names():
        layout = compute_calendar_layout(feed.fetch_reservation_intervals(name), window)
        warning_count += len(layout.warnings)
        properties.append({"name": name, "layout": layout.to_dict()})
    return properties, warning_count


def _write_js(path, data):
    output_dir = os.path.dirname(path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write("window.__CALENDAR_LAYOUT__ = ")
        json.dump(data, handle)
        handle.write(";\n")


def main():
    config.load_env_file()
    log = config.configure_logging()

    window = default_window(_window_start(log), config.calendar_months())
    feed = SnapshotFeed()
    try:
        properties, warning_count = build_layouts(feed, window)
    except FeedError as exc:
        log.error("Layout build failed: %s", exc)
        return 1

    data = {
        "generated_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
        "window": window.to_dict(),
        "properties": properties,
    }
    output_path = config.output_json()
    with open(output_path, "w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2)
    print(output_path)

    js_path = config.output_js()
    if js_path:
        _write_js(js_path, data)
        print(js_path)

    log.info(
        "Built layouts for %s properties (%s skipped intervals)",
        len(properties),
        warning_count,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
