import json
import sys
from datetime import date

from . import config
from .dates import format_day


def _halves(bar):
    halves = []
    if bar["leftEdge"] < 0.5:
        halves.append("am")
    if bar["rightEdge"] > 0.5:
        halves.append("pm")
    return halves


def _cell_issues(label, cell):
    issues = []
    occupancy = set()
    for bar in cell.get("bars", []):
        for half in _halves(bar):
            slot = (bar["lane"], half)
            if slot in occupancy:
                issues.append(f"{label} {cell['date']} lane {bar['lane']} overlap in {half} half")
            occupancy.add(slot)

    for tooltip in cell.get("tooltips", []):
        checkout = date.fromisoformat(tooltip["checkoutDay"])
        if tooltip["formattedRange"].endswith(format_day(checkout)):
            issues.append(f"{label} {cell['date']} {tooltip['id']} tooltip shows the checkout day as a night")

    roles = cell.get("intervals", [])
    checkouts = {entry["id"] for entry in roles if entry["role"] == "CHECK_OUT"}
    checkins = {entry["id"] for entry in roles if entry["role"] == "CHECK_IN"}
    expected = any(a != b for a in checkins for b in checkouts)
    if bool(cell.get("turnover")) != expected:
        issues.append(f"{label} {cell['date']} turnover flag disagrees with roles")
    return issues


def find_layout_issues(layout, label=""):
    issues = []
    seen = set()
    for month in layout.get("months", []):
        for week in month.get("weeks", []):
            for cell in week:
                if cell["date"] in seen:
                    continue
                seen.add(cell["date"])
                issues.extend(_cell_issues(label, cell))
    return issues


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else config.output_json()
    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)

    issues = []
    for prop in data.get("properties", []):
        issues.extend(find_layout_issues(prop.get("layout", {}), prop.get("name", "")))

    if issues:
        print("Found issues:")
        for issue in issues:
            print("-", issue)
        return 1

    print("No overlaps detected.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
