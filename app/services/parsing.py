# app/services/parsing.py
"""Small helpers for reading request payloads and formatting timestamps.

All datetimes handled by the services are naive UTC, matching what the
models store.
"""
import re
from datetime import datetime, timezone
from urllib.parse import urlparse

from flask import current_app, request

from app.errors import ValidationError

DATE_ONLY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def utcnow():
    """Current time as naive UTC, honouring an injected ``CLOCK``."""
    clock = current_app.config.get("CLOCK")
    if clock is not None:
        return clock()
    return datetime.now(timezone.utc).replace(tzinfo=None)


def clean_str(value):
    """Trimmed string, or None for missing/blank/non-string values."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def check_length(value, column, label):
    """Reject strings longer than the String(N) column they are stored in."""
    limit = getattr(column.type, "length", None)
    if value is not None and limit is not None and len(value) > limit:
        raise ValidationError(f"{label} too long (max {limit} characters)")
    return value


def parse_date_only(value):
    """'YYYY-MM-DD' -> UTC midnight, or None when malformed."""
    if not isinstance(value, str):
        return None
    m = DATE_ONLY_RE.match(value.strip())
    if not m:
        return None
    try:
        return datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def parse_iso(value):
    """ISO-8601 timestamp -> naive UTC datetime, or None when unparseable.

    Offsets are converted to UTC; values without an offset are taken as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def is_valid_url(value):
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc) and " " not in value


def to_iso(dt):
    """Naive UTC datetime -> '2025-12-09T02:00:00.000Z' (None stays None)."""
    if dt is None:
        return None
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def string_list(value):
    """Ordered list of trimmed, non-blank strings; anything else becomes []."""
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def json_body():
    """Request JSON object; anything else is a validation error."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("No JSON data provided")
    return data
