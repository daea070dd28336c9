"""Selection of the operative forecast period for a given instant."""

from datetime import datetime, timedelta
from typing import Optional, List

from flightwx.weather.models import Bulletin, ForecastPeriod, FlightCategory, PeriodStatus
from flightwx.weather.time_anchor import TimeAnchor


class BulletinQuery:
    """
    Queries over a decoded Bulletin timeline.

    The caller always supplies the query instant; nothing here reads the
    system clock.
    """

    @staticmethod
    def select(bulletin: Bulletin, now: datetime) -> Optional[ForecastPeriod]:
        """
        Select the single period to summarize at ``now``.

        Returns the first period, in chronological order, that is upcoming
        (starts at or after ``now``) or in progress (start <= now <= end).
        Falls back to the last period when none qualifies.

        Args:
            bulletin: Decoded bulletin
            now: Query instant

        Returns:
            ForecastPeriod, or None if the bulletin has no periods
        """
        if not bulletin.periods:
            return None

        now = TimeAnchor.as_utc(now)
        for period in bulletin.periods:
            start = period.valid_from
            end = period.valid_to
            if start is None or end is None:
                continue
            if start >= now or start <= now <= end:
                return period

        return bulletin.periods[-1]

    @staticmethod
    def category(bulletin: Bulletin, now: datetime) -> Optional[FlightCategory]:
        """Flight category of the selected period, None if no forecast is available."""
        period = BulletinQuery.select(bulletin, now)
        return period.flight_category if period is not None else None

    @staticmethod
    def active(bulletin: Bulletin, at: datetime) -> List[ForecastPeriod]:
        """
        All periods in effect at ``at``, in timeline order.

        Includes the base period and any overlapping TEMPO/BECMG/PROB periods.
        """
        at = TimeAnchor.as_utc(at)
        return [p for p in bulletin.periods if p.contains(at)]

    @staticmethod
    def status(period: ForecastPeriod, now: datetime) -> Optional[PeriodStatus]:
        """CURRENT, FUTURE or PAST relative to ``now``; None without a window."""
        if period.valid_from is None or period.valid_to is None:
            return None
        now = TimeAnchor.as_utc(now)
        if now < period.valid_from:
            return PeriodStatus.FUTURE
        if now <= period.valid_to:
            return PeriodStatus.CURRENT
        return PeriodStatus.PAST

    @staticmethod
    def time_until(period: ForecastPeriod, now: datetime) -> Optional[timedelta]:
        """Time until a future period starts, None if it has already started."""
        if BulletinQuery.status(period, now) is not PeriodStatus.FUTURE:
            return None
        return period.valid_from - TimeAnchor.as_utc(now)
