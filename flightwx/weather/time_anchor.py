"""Resolution of truncated day/hour/minute timestamps found in bulletins."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# Days of separation beyond which the nearest occurrence is in the adjacent month
ROLLOVER_THRESHOLD_DAYS = 15


class TimeAnchor:
    """
    Resolve truncated timestamps against a reference instant.

    Reports only encode day-of-month, never month or year. A truncated
    timestamp is read as the occurrence of that day nearest to the
    reference: more than 15 days behind the reference rolls forward one
    month, more than 15 days ahead rolls back one month.

    Example:
        issue = datetime(2024, 1, 30, 6, 0, tzinfo=timezone.utc)
        TimeAnchor.resolve(2, 12, 0, issue)  # 2024-02-02 12:00 UTC
    """

    ISSUE_TIME_PATTERN = re.compile(r'\b(\d{2})(\d{2})(\d{2})Z\b')

    @classmethod
    def resolve(
        cls,
        day: int,
        hour: int,
        minute: int,
        reference: Optional[datetime],
    ) -> Optional[datetime]:
        """
        Resolve (day, hour, minute) to an absolute timestamp.

        Hour 24 is accepted and means 00 of the following day.

        Args:
            day: Day of month (1-31)
            hour: Hour (0-24)
            minute: Minute (0-59)
            reference: Anchor instant, normally the bulletin issue time

        Returns:
            Absolute timestamp. On malformed input, the reference rounded
            down to the hour. None when there is no reference datetime to
            anchor against.
        """
        if not isinstance(reference, datetime):
            logger.debug("No reference to resolve %r/%r/%r against", day, hour, minute)
            return None
        reference = cls.as_utc(reference)
        try:
            day, hour, minute = int(day), int(hour), int(minute or 0)
        except (TypeError, ValueError):
            logger.debug("Unparseable time group %r/%r/%r", day, hour, minute)
            return cls._fallback(reference)

        if not (1 <= day <= 31 and 0 <= hour <= 24 and 0 <= minute <= 59):
            logger.debug("Out of range time group %02d%02d%02d", day, hour, minute)
            return cls._fallback(reference)

        months = 0
        if reference.day - day > ROLLOVER_THRESHOLD_DAYS:
            months = 1
        elif day - reference.day > ROLLOVER_THRESHOLD_DAYS:
            months = -1

        month_start = reference.replace(day=1) + relativedelta(months=months)
        extra_day = timedelta(0)
        if hour == 24:
            hour = 0
            extra_day = timedelta(days=1)

        try:
            resolved = month_start.replace(
                day=day, hour=hour, minute=minute, second=0, microsecond=0,
            )
        except ValueError:
            logger.debug(
                "Day %d does not exist in %04d-%02d",
                day, month_start.year, month_start.month,
            )
            return cls._fallback(reference)

        return resolved + extra_day

    @classmethod
    def parse_issue_time(cls, text: str, reference: Optional[datetime]) -> Optional[datetime]:
        """
        Find a DDHHMMZ issue-time token in text and resolve it.

        Args:
            text: Report or bulletin text
            reference: Anchor instant (e.g. the time the text was fetched)

        Returns:
            Resolved issue time, or None if no token is present or there
            is no reference datetime
        """
        match = cls.ISSUE_TIME_PATTERN.search(text or "")
        if not match:
            return None
        day, hour, minute = (int(g) for g in match.groups())
        return cls.resolve(day, hour, minute, reference)

    @staticmethod
    def as_utc(value: datetime) -> datetime:
        """Treat naive datetimes as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @staticmethod
    def _fallback(reference: datetime) -> datetime:
        return reference.replace(minute=0, second=0, microsecond=0)
