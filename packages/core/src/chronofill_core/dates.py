from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta

from chronofill_core.errors import ConfigurationError

_ONE_DAY = timedelta(days=1)


def walk_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end``, both inclusive.

    An inverted range (``end`` before ``start``) yields nothing rather than
    raising; callers see a run with zero days.
    """
    day = start
    while day <= end:
        yield day
        day += _ONE_DAY


def parse_day(value) -> date:
    """Coerce a config value (date, datetime or ``YYYY-MM-DD`` string) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ConfigurationError(f"Invalid date {value!r}; expected YYYY-MM-DD.")
