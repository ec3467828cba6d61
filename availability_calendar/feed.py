"""Reservation snapshots written by the iCal sync job.

The sync job fetches and parses each property's iCal feed and writes one
JSON document::

    {"generated_at": "...", "properties": [{"name": "...", "events": [...]}]}

``SnapshotFeed`` serves those events to the layout engine.
"""
import json
import logging

import requests

from . import config
from .errors import FeedError

LOG = logging.getLogger(__name__)


def _is_url(source):
    return source.lower().startswith(("http://", "https://"))


def _fetch_snapshot(url):
    try:
        response = requests.get(
            url,
            headers={"User-Agent": config.snapshot_user_agent()},
            timeout=config.snapshot_request_timeout(),
        )
    except requests.RequestException as exc:
        raise FeedError(f"Snapshot request failed for {url}: {exc}") from exc
    if not (200 <= response.status_code < 300):
        raise FeedError(f"Snapshot request failed for {url}: HTTP {response.status_code}")
    try:
        return response.json()
    except ValueError as exc:
        raise FeedError(f"Snapshot at {url} is not valid JSON") from exc


def _read_snapshot(path):
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as exc:
        raise FeedError(f"Cannot read snapshot {path}: {exc}") from exc
    except ValueError as exc:
        raise FeedError(f"Snapshot {path} is not valid JSON") from exc


def load_snapshot(source):
    data = _fetch_snapshot(source) if _is_url(source) else _read_snapshot(source)
    if not isinstance(data, dict) or not isinstance(data.get("properties"), list):
        raise FeedError(f"Snapshot {source} has no properties list")
    return data


def _property_key(name):
    return str(name or "").strip().lower()


class SnapshotFeed:
    def __init__(self, source=None):
        self.source = source or config.snapshot_source()
        self._snapshot = None

    def _load(self):
        self._snapshot = load_snapshot(self.source)
        LOG.info(
            "Loaded snapshot %s with %s properties",
            self.source,
            len(self._snapshot["properties"]),
        )
        return self._snapshot

    def snapshot(self):
        return self._snapshot if self._snapshot is not None else self._load()

    def property_names(self):
        return [str(prop.get("name") or "") for prop in self.snapshot()["properties"] if isinstance(prop, dict)]

    def _events(self, snapshot, property_id):
        key = _property_key(property_id)
        for prop in snapshot["properties"]:
            if isinstance(prop, dict) and _property_key(prop.get("name")) == key:
                events = prop.get("events") or []
                return list(events) if isinstance(events, list) else []
        LOG.warning("Property %s not found in snapshot %s", property_id, self.source)
        return []

    def fetch_reservation_intervals(self, property_id):
        """Raw events for ``property_id`` from the cached snapshot, possibly stale."""
        return self._events(self.snapshot(), property_id)

    def refresh_reservation_intervals(self, property_id):
        events = self._events(self._load(), property_id)
        return {"eventsCount": len(events)}
