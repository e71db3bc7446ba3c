from datetime import datetime
from zoneinfo import ZoneInfo

from flask import current_app


def now() -> datetime:
    """Current naive wall-clock time in the configured TIMEZONE.

    Room hours and booking times are local wall-clock strings, so the
    calendar compares against a naive local datetime.
    """
    tz_name = current_app.config.get("TIMEZONE") or ""
    if not tz_name:
        return datetime.now()
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
