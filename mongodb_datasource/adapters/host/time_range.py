"""
TimeService implementations for running outside a dashboard host.
"""

from datetime import datetime, timedelta, timezone

from mongodb_datasource.core.domain.query import TimeRange
from mongodb_datasource.core.ports.host_services import TimeService


class StaticTimeService(TimeService):
    """Always returns the same range."""

    def __init__(self, time_range: TimeRange):
        self._range = time_range

    def time_range(self) -> TimeRange:
        return self._range


class RelativeTimeService(TimeService):
    """The last ``span`` up to now, like the host's "now-6h" default."""

    def __init__(self, span: timedelta = timedelta(hours=6)):
        self.span = span

    def time_range(self) -> TimeRange:
        now = datetime.now(timezone.utc)
        seconds = int(self.span.total_seconds())
        raw_from = f"now-{seconds // 3600}h" if seconds % 3600 == 0 else f"now-{seconds}s"
        return TimeRange(from_=now - self.span, to=now, raw={"from": raw_from, "to": "now"})
