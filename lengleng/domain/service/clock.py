"""Time source for domain services."""

from datetime import datetime


class Clock:
    """Clock interface.

    Services never call ``datetime.now()`` directly so expiry and reminder
    timing can be driven deterministically.
    """

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        raise NotImplementedError
