"""Schedule point value object."""

from dataclasses import dataclass
from datetime import date, datetime, time


DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "18:00"
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class SchedulePoint:
    """One end of an election's scheduling window.

    Inbound payloads carry either a bare date string or a ``{date, time}``
    object; both are normalized into this type at the boundary.
    """

    date: date
    time: str

    @property
    def clock(self) -> time:
        """The ``HH:MM`` time as a ``datetime.time``."""
        return time.fromisoformat(self.time)

    def to_datetime(self) -> datetime:
        """Combine date and time into a naive datetime."""
        return datetime.combine(self.date, self.clock)

    def to_dict(self) -> dict[str, str]:
        """Caller-facing ``{date, time}`` shape."""
        return {"date": self.date.isoformat(), "time": self.time}
