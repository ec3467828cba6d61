import json
import logging
import os

LOG = logging.getLogger(__name__)

DEFAULT_STATUS_COLOR_ROLES = {
    "confirmed": "confirmed",
    "tentative": "tentative",
    "cancelled": "cancelled",
    "canceled": "cancelled",
    "pending": "pending",
}


def load_env_file(path=None):
    path = path or os.getenv("ENV_FILE", ".env")
    if not path or not os.path.exists(path):
        return
    try:
        with open(path, "r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip("'").strip('"')
                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError as exc:
        LOG.warning("Failed to read %s: %s", path, exc)


def _load_json_env(name, default_value):
    raw = os.getenv(name)
    if not raw:
        return default_value
    try:
        parsed = json.loads(raw)
    except ValueError:
        LOG.warning("Invalid JSON in %s; using defaults.", name)
        return default_value
    if not isinstance(parsed, dict):
        LOG.warning("Expected dict JSON for %s; using defaults.", name)
        return default_value
    return {str(k).strip().lower(): str(v) for k, v in parsed.items()}


def _int_env(name, default_value):
    raw = os.getenv(name)
    if not raw:
        return default_value
    try:
        return int(raw)
    except ValueError:
        LOG.warning("Invalid integer in %s; using %s.", name, default_value)
        return default_value


def log_level():
    return os.getenv("LOG_LEVEL", "INFO")


def feed_timezone():
    return os.getenv("FEED_TIMEZONE", "UTC")


def default_title():
    return os.getenv("DEFAULT_TITLE", "Reservation")


def default_status():
    return os.getenv("DEFAULT_STATUS", "confirmed")


def status_color_roles():
    return _load_json_env("STATUS_COLOR_ROLES_JSON", DEFAULT_STATUS_COLOR_ROLES)


def snapshot_source():
    return os.getenv("SNAPSHOT_SOURCE", "calendar_data.json")


def snapshot_request_timeout():
    return _int_env("SNAPSHOT_REQUEST_TIMEOUT", 20)


def snapshot_user_agent():
    return os.getenv("SNAPSHOT_USER_AGENT", "AvailabilityCalendar/1.0")


def calendar_start():
    return os.getenv("CALENDAR_START") or None


def calendar_months():
    return max(1, _int_env("CALENDAR_MONTHS", 3))


def output_json():
    return os.getenv("OUTPUT_JSON", "calendar_layout.json")


def output_js():
    return os.getenv("OUTPUT_JS") or None


def configure_logging(name="availability_calendar"):
    logger = logging.getLogger(name)
    logger.setLevel(log_level())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
    return logger
