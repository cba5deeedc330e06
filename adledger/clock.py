from datetime import date, datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def day_key(moment: datetime) -> date:
    """Calendar day of ``moment`` in UTC. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()
