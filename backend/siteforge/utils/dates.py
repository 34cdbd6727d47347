from datetime import datetime, timezone

from dateutil.parser import isoparse

from siteforge.errors import ValidationError


def parse_datetime(value, field="datetime"):
    """
    Parse an ISO-8601 string into a naive UTC datetime.
    Aware values are converted to UTC first.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = isoparse(str(value))
        except (ValueError, OverflowError) as exc:
            raise ValidationError(f"Invalid {field}: {value}") from exc

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def isoformat(value):
    return value.isoformat() if value else None
