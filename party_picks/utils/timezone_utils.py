"""
Timezone and lockout helpers for Party Picks
"""

from datetime import datetime, timezone

import pytz
from flask import current_app


def get_app_timezone():
    """Get the event's display timezone"""
    try:
        timezone_name = current_app.config.get("TIMEZONE", "UTC")
        return pytz.timezone(timezone_name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def get_utc_time():
    """Get current time in UTC"""
    return datetime.now(timezone.utc)


def convert_to_app_timezone(dt):
    """Convert a datetime to the event's timezone"""
    if dt is None:
        return None

    # Naive datetimes are stored as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(get_app_timezone())


def get_lockout_time():
    return current_app.config["LOCKOUT_TIME"]


def is_locked(now=None):
    """True once the global lockout instant has passed"""
    now = now or get_utc_time()
    return now >= get_lockout_time()


def seconds_until_lockout(now=None):
    now = now or get_utc_time()
    return max(0, int((get_lockout_time() - now).total_seconds()))


def format_countdown(seconds):
    """Countdown text as shown next to the picks ("2d 3h 4m", "3h 4m 5s", "4m 5s")"""
    if seconds <= 0:
        return "Locked"

    days, remainder = divmod(seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


def format_lockout_time(format_str="%a %b %d at %I:%M %p %Z"):
    """Lockout instant formatted in the event's timezone"""
    return convert_to_app_timezone(get_lockout_time()).strftime(format_str)
