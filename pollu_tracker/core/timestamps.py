from datetime import date, datetime, timezone


def utc_now_iso() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(value: datetime) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_timestamp(value) -> str:
    """
    Accept an ISO-8601 date or datetime (string or object) and return the
    canonical UTC string. Naive values are taken as UTC.

    Raises ValueError for anything that does not parse.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = _parse_iso(value)
    try:
        return format_timestamp(parsed)
    except OverflowError as exc:
        raise ValueError(f"timestamp out of range: {value}") from exc


def _parse_iso(value) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("timestamp must be a non-empty ISO-8601 string")
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        parsed = datetime.combine(date.fromisoformat(raw), datetime.min.time())
    return parsed
