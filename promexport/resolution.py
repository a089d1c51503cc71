"""
Query resolution (step) selection and time window validation.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

# Step of floor(minutes / 4.2) seconds keeps long windows near 250 samples
STEP_DIVISOR_MINUTES = 4.2


def select_step(step: Optional[int], duration: timedelta) -> int:
    """
    Pick the query step in seconds.

    An explicit positive step always wins. Otherwise short windows keep
    sub-minute granularity and long windows are thinned out.
    """
    if step is not None and step > 0:
        return step
    if duration < timedelta(minutes=15):
        return 1
    if duration < timedelta(minutes=30):
        return 3
    minutes = duration.total_seconds() / 60
    return max(1, int(minutes / STEP_DIVISOR_MINUTES))


@dataclass(frozen=True)
class TimeWindow:
    """Query window; end must be after start"""
    start: datetime
    end: datetime
    step: Optional[int] = None

    def __post_init__(self):
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("window start and end must both be naive or both be timezone-aware")
        if self.end <= self.start:
            raise ValueError(f"window end {self.end} is not after start {self.start}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def resolved_step(self) -> int:
        return select_step(self.step, self.duration)

    @property
    def start_unix(self) -> int:
        return math.floor(self.start.timestamp())

    @property
    def end_unix(self) -> int:
        return math.floor(self.end.timestamp())
