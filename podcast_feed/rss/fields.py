"""Field resolution and normalization shared by channel and episode records."""

import html
import math
import re
from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any

from podcast_feed.errors import InvalidDateError, MissingRequiredFieldError

# Characters that XML 1.0 does not allow anywhere in a document
_CONTROL = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\uFFFE\uFFFF\ud800-\udfff]")


def clean_text(value: str) -> str:
    """Strip the BOM and code points XML 1.0 does not allow."""
    return _CONTROL.sub("", value.replace("\ufeff", ""))


def escape(value: Any) -> Any:
    """HTML-entity-escape a string value.

    Non-string scalars (numbers, booleans) and None are returned unchanged so
    that later normalization can still see their type.
    """
    if isinstance(value, str):
        return html.escape(clean_text(value), quote=True)
    return value


def resolve_field(
    name: str,
    data: Mapping[str, Any],
    defaults: Mapping[str, Any],
    *,
    required: bool = False,
    raw: bool = False,
    scope: str = "episode",
) -> Any:
    """Resolve one field from caller data, falling back to the configured default.

    A key that is absent or explicitly None falls back to ``defaults[name]``,
    then to None. Raw fields keep their markup; every other field is escaped.

    Raises:
        MissingRequiredFieldError: If ``required`` and nothing resolved.
    """
    value = data.get(name)
    if value is None:
        value = defaults.get(name)

    if value is None:
        if required:
            raise MissingRequiredFieldError(name, scope)
        return None

    if raw:
        return clean_text(value) if isinstance(value, str) else value
    return escape(value)


def parse_publish_date(value: Any, field: str = "publish_at") -> datetime:
    """Normalize a publish date to a timezone-aware datetime.

    Accepts datetimes, dates, ISO 8601 text (a trailing ``Z`` included) and
    RFC 2822 text. Naive values are taken as UTC.

    Raises:
        InvalidDateError: If the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = html.unescape(value).strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                parsed = parsedate_to_datetime(text)
            except (TypeError, ValueError):
                raise InvalidDateError(field, value) from None
    else:
        raise InvalidDateError(field, value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_rfc2822(value: datetime) -> str:
    """Format a datetime for <pubDate>, e.g. ``Mon, 01 Jan 2024 00:00:00 +0000``."""
    return format_datetime(value)


def positive_int(value: Any) -> int | None:
    """Return value as a positive whole number, or None.

    Non-numeric, fractional, zero and negative values all yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            return positive_int(int(value.strip()))
        except ValueError:
            pass
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number) or number <= 0 or not number.is_integer():
        return None
    return int(number)


def format_duration(value: Any) -> Any:
    """Format a duration given in seconds as ``H:MM:SS`` or ``M:SS``.

    Text durations and non-finite numbers are returned unchanged.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if not math.isfinite(value):
        return value
    total = max(int(value), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def flag_text(value: Any) -> str | None:
    """Render a flag verbatim, spelling booleans as ``true``/``false``."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
