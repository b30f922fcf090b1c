from __future__ import annotations

from datetime import date, datetime

_EPOCH_ORDINAL = date(1970, 1, 1).toordinal()
_DATE_FORMAT = "%Y-%m-%d"
_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
_DATETIME_LENGTH = 19
_SECONDS_PER_DAY = 86400.0


def to_epoch_days(value: str | None) -> float | None:
    """Map a ``YYYY-MM-DD`` or ``YYYY-MM-DDTHH:MM:SS`` string to days since 1970-01-01.

    Time of day becomes the fractional part. Anything after the first 19
    characters of a datetime (offsets, zone names, fractions of a second) is
    ignored. Unparseable input yields ``None``.
    """
    if not value:
        return None
    raw = value.strip()
    try:
        return float(datetime.strptime(raw, _DATE_FORMAT).toordinal() - _EPOCH_ORDINAL)
    except ValueError:
        pass
    parsed = _parse_datetime(raw)
    if parsed is None and len(raw) > _DATETIME_LENGTH:
        parsed = _parse_datetime(raw[:_DATETIME_LENGTH])
    if parsed is None:
        return None
    seconds = parsed.hour * 3600 + parsed.minute * 60 + parsed.second
    return (parsed.toordinal() - _EPOCH_ORDINAL) + seconds / _SECONDS_PER_DAY


def _parse_datetime(raw: str) -> datetime | None:
    try:
        return datetime.strptime(raw, _DATETIME_FORMAT)
    except ValueError:
        return None
