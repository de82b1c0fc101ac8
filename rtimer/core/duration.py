"""Human-readable durations ("1h30m", "2 days", "45 sec") to whole seconds.

The offset is applied to a fixed reference instant and the result is read
back as seconds since the epoch, the way ``date -d "@1 + 1 hour"`` style
arithmetic works. Months and years are therefore calendar months and years
counted from that reference instant.
"""

import calendar
import re
from datetime import datetime, timedelta, timezone

from rtimer.common.errors import InvalidDurationError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# One second past the epoch. The conversion subtracts that second back off, so "0s" is 0 rather than 1.
REFERENCE = EPOCH + timedelta(seconds=1)

# Unit spellings mapped onto (kind, multiplier). "month" units are applied with calendar arithmetic, everything
# else is a fixed number of seconds.
_UNITS = {
    "": ("seconds", 1),
}
for _names, _unit in (
    (("s", "sec", "secs", "second", "seconds"), ("seconds", 1)),
    (("m", "min", "mins", "minute", "minutes"), ("seconds", 60)),
    (("h", "hr", "hrs", "hour", "hours"), ("seconds", 3600)),
    (("d", "day", "days"), ("seconds", 86400)),
    (("w", "week", "weeks"), ("seconds", 7 * 86400)),
    (("fortnight", "fortnights"), ("seconds", 14 * 86400)),
    (("month", "months"), ("months", 1)),
    (("y", "year", "years"), ("months", 12)),
):
    for _name in _names:
        _UNITS[_name] = _unit

# One term is a signed integer followed by an optional unit, with optional whitespace in between.
_TERM = re.compile(r"\s*([+-]?)\s*([0-9]+)\s*([a-z]*)\s*")


def _add_months(moment, months):
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


# Splits the text into (seconds, months) totals. Raises ValueError on anything that isn't a sequence of terms.
def _parse_terms(text):
    seconds = 0
    months = 0
    position = 0
    text = text.lower()
    while position < len(text):
        match = _TERM.match(text, position)
        if match is None or match.end() == position:
            raise ValueError(f"unexpected input at offset {position}")
        sign, amount, unit = match.groups()
        if unit not in _UNITS:
            raise ValueError(f"unknown unit '{unit}'")
        kind, multiplier = _UNITS[unit]
        value = int(amount) * multiplier * (-1 if sign == "-" else 1)
        if kind == "months":
            months += value
        else:
            seconds += value
        position = match.end()
    return seconds, months


def parse_duration(text):
    """Convert a duration string to a non-negative number of whole seconds.

    Raises :class:`InvalidDurationError` carrying the raw input if the string
    can't be parsed or works out to a negative duration.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidDurationError(text)
    try:
        seconds, months = _parse_terms(text)
        target = _add_months(REFERENCE, months) + timedelta(seconds=seconds)
    except (ValueError, OverflowError):
        raise InvalidDurationError(text) from None

    result = int((target - EPOCH).total_seconds()) - 1
    if result < 0:
        raise InvalidDurationError(text)
    return result
