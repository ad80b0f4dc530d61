"""Jinja filters for prices, durations and timestamps."""
from datetime import datetime, timedelta
from typing import Optional, Union

from skyfront.domain.entities.common import align_now, parse_datetime


def format_price(amount: Optional[float], currency_symbol: str = "$") -> str:
    """Format an amount as ``$1,234.50``."""
    amount = float(amount or 0)
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol}{abs(amount):,.2f}"


def format_duration(
    start: Union[datetime, timedelta, int, float, None],
    end: Optional[datetime] = None
) -> str:
    """
    Render a duration as ``2h 5m``.

    Accepts two datetimes, a timedelta, or a number of minutes (as in a
    transit option's total duration).
    """
    if start is None:
        return ""
    if isinstance(start, datetime):
        if end is None:
            return ""
        start = end - start
    if isinstance(start, timedelta):
        minutes = int(start.total_seconds() // 60)
    else:
        minutes = int(start)
    hours, minutes = divmod(max(minutes, 0), 60)
    return f"{hours}h {minutes}m"


def time_until(moment: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Countdown to a departure: ``3 days left``, ``1 hour left``, ``Departing soon`` or ``Departed``."""
    if moment is None:
        return ""
    now = align_now(moment, now or datetime.now().astimezone())
    seconds = (moment - now).total_seconds()
    if seconds < 0:
        return "Departed"
    days, remainder = divmod(int(seconds), 86400)
    hours = remainder // 3600
    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} left"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} left"
    return "Departing soon"


def _as_datetime(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return value if isinstance(value, datetime) else parse_datetime(value)


def format_datetime(value, fmt: str = "%b %d, %Y %H:%M") -> str:
    moment = _as_datetime(value)
    return moment.strftime(fmt) if moment else ""


def format_date(value, fmt: str = "%a, %b %d, %Y") -> str:
    return format_datetime(value, fmt)


def format_time(value, fmt: str = "%H:%M") -> str:
    return format_datetime(value, fmt)


def format_label(value) -> str:
    """``IN_FLIGHT`` -> ``In Flight``."""
    text = str(getattr(value, "value", value) or "")
    return text.replace("_", " ").title()


JINJA_FILTERS = {
    "price": format_price,
    "duration": format_duration,
    "time_until": time_until,
    "datetime": format_datetime,
    "date": format_date,
    "time": format_time,
    "label": format_label,
}
