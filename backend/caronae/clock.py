"""Local wall-clock time for ride scheduling.

Rides are stored as naive datetimes in the configured timezone, so "now" has
to be computed the same way. Routers receive it through the ``get_now``
dependency and pass it down to the services explicitly; tests override the
dependency to freeze time.
"""
from datetime import datetime

import pytz

from caronae.config import settings


def local_now() -> datetime:
    """Current time in ``settings.TIMEZONE`` with tzinfo stripped."""
    tz = pytz.timezone(settings.TIMEZONE)
    return datetime.now(tz).replace(tzinfo=None, microsecond=0)


def get_now() -> datetime:
    return local_now()
