"""Translation of ISO-8601 recurrence expressions into Metronome schedules.

Metronome schedules recur through five-field cron expressions
(``minute hour day-of-month month day-of-week``) evaluated in a timezone.
This module turns a repeating-interval expression such as ``R5/PT1M/PT2M``
(repeat count / start offset / interval) into that representation and
builds the "run now" schedule used to fire a job as soon as possible.

The minute is the smallest scheduling unit the service understands, so
intervals shorter than one minute (or not a whole number of minutes) are
rejected instead of being rounded.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from metronomeops.core.errors import ValidationError
from metronomeops.core.models import Schedule

REPEAT_PATTERN = re.compile(r"^R(?P<repeat>\d+)$")
DURATION_PATTERN = re.compile(
    r"^P(?!$)"
    r"(?:(?P<years>\d+(?:\.\d+)?)Y)?"
    r"(?:(?P<months>\d+(?:\.\d+)?)M)?"
    r"(?:(?P<weeks>\d+(?:\.\d+)?)W)?"
    r"(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?!$)"
    r"(?:(?P<hours>\d+(?:\.\d+)?)H)?"
    r"(?:(?P<minutes>\d+(?:\.\d+)?)M)?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)

# Calendar units have no fixed length; approximate them for scheduling.
_UNIT_SECONDS = {
    "years": 365 * 86400,
    "months": 30 * 86400,
    "weeks": 7 * 86400,
    "days": 86400,
    "hours": 3600,
    "minutes": 60,
    "seconds": 1,
}

MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)
DAY = timedelta(days=1)
WEEK = timedelta(weeks=1)

IMMEDIATE_CONCURRENCY_POLICY = "ALLOW"
IMMEDIATE_STARTING_DEADLINE_SECONDS = 60
IMMEDIATE_TIMEZONE = "GMT"


def parse_duration(text: str) -> timedelta:
    """
    Parse an ISO-8601 duration (``PnYnMnWnDTnHnMnS``) into a timedelta.

    Years and months are approximated as 365 and 30 days.

    Raises:
        ValidationError: If the text is not a valid ISO-8601 duration.
    """
    match = DURATION_PATTERN.match(text.strip())
    if not match:
        raise ValidationError(f"Illegal duration '{text}'")
    seconds = sum(
        float(value) * _UNIT_SECONDS[unit]
        for unit, value in match.groupdict().items()
        if value is not None
    )
    return timedelta(seconds=seconds)


def _parse_start(text: str) -> timedelta | datetime:
    """Return the start segment as an offset from now or an absolute time."""
    if not text:
        return timedelta(0)
    if text.startswith("P"):
        return parse_duration(text)
    try:
        moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(f"Illegal start '{text}'") from exc
    return _as_utc(moment)


def _as_utc(moment: datetime) -> datetime:
    """Return moment in UTC; naive datetimes are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class Recurrence:
    """
    A parsed repeating interval.

    Attributes:
        repeat: Number of repetitions requested (always >= 1).
        start: Offset from "now", or an absolute UTC start time.
        interval: Time between two runs, a whole number of minutes.
    """

    repeat: int
    start: timedelta | datetime
    interval: timedelta

    def anchor(self, now: datetime | None = None) -> datetime:
        """Return the UTC time of the first run."""
        if isinstance(self.start, datetime):
            return self.start
        return _as_utc(now or datetime.now(timezone.utc)) + self.start

    def to_cron(self, now: datetime | None = None) -> str:
        """
        Render the interval as a five-field cron expression anchored at the
        first run.

        Cron steps restart at every hour, day and month boundary, so only
        intervals that keep an even spacing across them are accepted:
        minute steps that divide an hour, hour steps that divide a day, one
        day, and one week. The repeat count has no cron equivalent; the
        schedule keeps firing until it is deleted.

        Raises:
            ValidationError: If the interval cannot be expressed in cron.
        """
        start = self.anchor(now)
        if self.interval < HOUR:
            step = self.interval // MINUTE
            if 60 % step == 0:
                return f"{_stepped(start.minute % step, step, 59)} * * * *"
        elif self.interval < DAY and self.interval % HOUR == timedelta(0):
            step = self.interval // HOUR
            if 24 % step == 0:
                return f"{start.minute} {_stepped(start.hour % step, step, 23)} * * *"
        elif self.interval == DAY:
            return f"{start.minute} {start.hour} * * *"
        elif self.interval == WEEK:
            return f"{start.minute} {start.hour} * * {(start.weekday() + 1) % 7}"
        raise ValidationError(
            f"Interval {self.interval} cannot be expressed as an evenly spaced "
            "cron schedule"
        )


def _stepped(offset: int, step: int, last: int) -> str:
    """Return a cron step field firing every `step` units from `offset`."""
    if step == 1:
        return "*"
    if offset == 0:
        return f"*/{step}"
    return f"{offset}-{last}/{step}"


def parse_recurrence(expression: str) -> Recurrence:
    """
    Parse ``R<n>/<start>/<interval>`` into a Recurrence.

    The start segment may be empty (start now), an ISO-8601 duration offset
    or an ISO-8601 timestamp.

    Raises:
        ValidationError: If the expression is malformed, the repeat count is
            zero or the interval is not a positive whole number of minutes.
    """
    parts = expression.strip().split("/")
    if len(parts) != 3:
        raise ValidationError(
            f"Recurrence '{expression}' must have the form R<n>/<start>/<interval>"
        )
    repeat_part, start_part, interval_part = parts

    match = REPEAT_PATTERN.match(repeat_part)
    if not match:
        raise ValidationError(f"No repeat pattern in '{expression}' (expected R<n>)")
    repeat = int(match.group("repeat"))
    if repeat < 1:
        raise ValidationError(f"Repeat count must be at least 1 in '{expression}'")

    interval = parse_duration(interval_part)
    if interval < MINUTE:
        raise ValidationError(
            f"Too small a duration '{interval_part}': the minimum interval is one minute"
        )
    if interval % MINUTE != timedelta(0):
        raise ValidationError(
            f"Interval '{interval_part}' must be a whole number of minutes"
        )

    return Recurrence(repeat=repeat, start=_parse_start(start_part), interval=interval)


def cron_for_time(moment: datetime) -> str:
    """Return a cron expression firing at the given minute (evaluated in UTC)."""
    at = _as_utc(moment)
    return f"{at.minute} {at.hour} {at.day} {at.month} *"


def _schedule_id(prefix: str, moment: datetime) -> str:
    return f"{prefix}-{moment:%Y%m%d%H%M%S}-{uuid.uuid4().hex[:8]}"


def immediate_schedule(now: datetime | None = None) -> Schedule:
    """
    Return a schedule that fires as soon as possible.

    The cron expression targets the next whole minute (the current one may
    already have passed by the time the service evaluates it).
    """
    moment = _as_utc(now or datetime.now(timezone.utc))
    fire_at = moment.replace(second=0, microsecond=0) + MINUTE
    return Schedule(
        id=_schedule_id("now", moment),
        cron=cron_for_time(fire_at),
        concurrency_policy=IMMEDIATE_CONCURRENCY_POLICY,
        enabled=True,
        starting_deadline_seconds=IMMEDIATE_STARTING_DEADLINE_SECONDS,
        timezone=IMMEDIATE_TIMEZONE,
    )


def recurrence_schedule(
    expression: str,
    *,
    schedule_id: str | None = None,
    now: datetime | None = None,
    concurrency_policy: str = IMMEDIATE_CONCURRENCY_POLICY,
    starting_deadline_seconds: int = IMMEDIATE_STARTING_DEADLINE_SECONDS,
) -> Schedule:
    """Return a schedule for a recurrence expression (see ``parse_recurrence``)."""
    moment = _as_utc(now or datetime.now(timezone.utc))
    recurrence = parse_recurrence(expression)
    return Schedule.create(
        schedule_id or _schedule_id("every", moment),
        recurrence.to_cron(moment),
        concurrency_policy=concurrency_policy,
        enabled=True,
        starting_deadline_seconds=starting_deadline_seconds,
        timezone=IMMEDIATE_TIMEZONE,
    )
