"""Random plan for a run: commits per day, time of day, throttle delay.

Every draw goes through an injected random source so a run can be made
reproducible with a seed, or fully scripted in tests. The source only needs
a ``randint(a, b)`` method with inclusive bounds, as ``random.Random`` has.
"""

from __future__ import annotations

import random
from datetime import date, datetime, time, tzinfo
from typing import Protocol

from chronofill_core.models import CommitEvent, DayPlan


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


class RandomScheduler:
    def __init__(
        self,
        rng: RandomSource | None = None,
        min_commits: int = 5,
        max_commits: int = 10,
        min_delay_ms: int = 200,
        max_delay_ms: int = 800,
        tz: tzinfo | None = None,
    ):
        self._rng = rng if rng is not None else random.Random()
        self.min_commits = min_commits
        self.max_commits = max_commits
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self._tz = tz

    @classmethod
    def from_config(cls, config: dict, tz: tzinfo | None = None) -> RandomScheduler:
        return cls(
            rng=random.Random(config.get("seed")),
            min_commits=config["min_commits"],
            max_commits=config["max_commits"],
            min_delay_ms=config["min_delay_ms"],
            max_delay_ms=config["max_delay_ms"],
            tz=tz,
        )

    def commit_count(self) -> int:
        return self._rng.randint(self.min_commits, self.max_commits)

    def time_on(self, day: date) -> datetime:
        """Return a random second-resolution moment on ``day``.

        Without an explicit timezone the wall-clock time is interpreted in
        the local zone, the way ``git commit --date`` would read it.
        """
        hour = self._rng.randint(0, 23)
        minute = self._rng.randint(0, 59)
        second = self._rng.randint(0, 59)
        moment = datetime.combine(day, time(hour, minute, second))
        if self._tz is not None:
            return moment.replace(tzinfo=self._tz)
        return moment.astimezone()

    def delay_ms(self) -> int:
        return self._rng.randint(self.min_delay_ms, self.max_delay_ms)

    def plan_day(self, day: date, day_index: int = 0) -> DayPlan:
        return DayPlan(date=day, day_index=day_index, commit_count=self.commit_count())

    def events(self, plan: DayPlan) -> list[CommitEvent]:
        # Drawn in sequence order; not sorted by time, matching commit order on disk.
        return [
            CommitEvent(timestamp=self.time_on(plan.date), sequence=seq, day_index=plan.day_index)
            for seq in range(1, plan.commit_count + 1)
        ]
