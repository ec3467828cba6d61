import base64
import json
import logging

from . import config
from .errors import CalendarLayoutError
from .layout import compute_calendar_layout

LOG = logging.getLogger(__name__)
LOG.setLevel(config.log_level())


def _parse_event(event):
    data = event
    if isinstance(event, dict) and "body" in event:
        body = event.get("body")
        if event.get("isBase64Encoded") and isinstance(body, str):
            try:
                body = base64.b64decode(body, validate=True).decode("utf-8")
            except ValueError as exc:
                LOG.warning("Failed to base64-decode event body: %s", exc)
                return None
        if isinstance(body, str):
            try:
                data = json.loads(body)
            except ValueError:
                LOG.warning("Failed to JSON-decode event body.")
                data = None
        else:
            data = body
    return data


def _response(status_code, payload):
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload),
    }


def lambda_handler(event, context):
    data = _parse_event(event)
    if not isinstance(data, dict):
        LOG.error("Unexpected payload type: %s", type(data))
        return _response(400, {"error": "Invalid payload."})

    intervals = data.get("intervals")
    window = data.get("window")
    if not isinstance(intervals, list) or window is None:
        return _response(400, {"error": "Payload needs an intervals list and a window."})

    try:
        layout = compute_calendar_layout(intervals, window)
    except CalendarLayoutError as exc:
        LOG.warning("Rejected window %s: %s", window, exc)
        return _response(400, {"error": str(exc), "code": exc.code})

    LOG.info(
        "Computed layout for %s intervals (%s skipped)",
        len(intervals),
        len(layout.warnings),
    )
    return _response(200, layout.to_dict())
