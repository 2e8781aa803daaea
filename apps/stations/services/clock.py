"""Time source for session deadlines."""

from django.utils import timezone


class SystemClock:
    """Wall clock; anything with a ``now()`` returning an aware datetime can stand in."""

    def now(self):
        return timezone.now()


system_clock = SystemClock()
