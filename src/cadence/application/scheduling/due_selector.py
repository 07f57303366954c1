"""
Due-item selection and review load balancing.

Read-only queries over collections of StudyItem objects; nothing here
changes an item's memory state.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from cadence.domain.constants import DEFAULT_MAX_DEFER_DAYS, PRIORITY_STABILITY_OFFSET
from cadence.domain.scheduling.models import ScheduleEntry, StudyItem

logger = logging.getLogger(__name__)


def review_priority(item: StudyItem) -> float:
    """Harder, less stable items get higher priority."""
    return item.model.difficulty / (item.model.stability_factor + PRIORITY_STABILITY_OFFSET)


class DueSelector:
    """
    Filters and schedules study items by their next-review date.

    Stateless and side-effect free.
    """

    def due_now(self, items: Iterable[StudyItem], now: datetime) -> list[StudyItem]:
        """
        Items whose next review is at or before `now`.
        """
        return [item for item in items if item.model.next_review <= now]

    def due_within(
        self, items: Iterable[StudyItem], now: datetime, horizon_days: int
    ) -> list[StudyItem]:
        """
        Items due strictly after `now` but no later than `now + horizon_days`.
        """
        if horizon_days < 0:
            raise ValueError(f"horizon_days must be >= 0, got {horizon_days}")

        horizon = now + timedelta(days=horizon_days)
        return [item for item in items if now < item.model.next_review <= horizon]

    def balance_load(
        self,
        items: Iterable[StudyItem],
        max_per_day: int,
        max_defer_days: int = DEFAULT_MAX_DEFER_DAYS,
    ) -> ScheduleEntry:
        """
        Spread reviews so no calendar day exceeds `max_per_day`.

        Items are placed in priority order (see `review_priority`), each on
        the first day at or after its natural due date with spare capacity.
        The search looks at most `max_defer_days` past the natural date; if
        that whole window is full the item lands on the least loaded day in
        it, so an item is never scheduled earlier than its natural date.

        Args:
            items: Items to schedule.
            max_per_day: Capacity per calendar day (>= 1).
            max_defer_days: How far an item may be pushed back (>= 0).

        Returns:
            Mapping of item id to assigned date.
        """
        if max_per_day < 1:
            raise ValueError(f"max_per_day must be >= 1, got {max_per_day}")
        if max_defer_days < 0:
            raise ValueError(f"max_defer_days must be >= 0, got {max_defer_days}")

        ordered = sorted(items, key=review_priority, reverse=True)
        daily_load: dict[date, int] = {}
        schedule: ScheduleEntry = {}

        for item in ordered:
            natural = item.model.next_review_date
            assigned = self._first_open_day(natural, daily_load, max_per_day, max_defer_days)

            if assigned is None:
                assigned = self._least_loaded_day(natural, daily_load, max_defer_days)
                logger.warning(
                    f"No capacity within {max_defer_days} days of {natural} for {item.id}; "
                    f"overbooking {assigned}"
                )

            schedule[item.id] = assigned
            daily_load[assigned] = daily_load.get(assigned, 0) + 1

        return schedule

    @staticmethod
    def _first_open_day(
        natural: date, daily_load: dict[date, int], max_per_day: int, max_defer_days: int
    ) -> date | None:
        for offset in range(max_defer_days + 1):
            day = natural + timedelta(days=offset)
            if daily_load.get(day, 0) < max_per_day:
                return day
        return None

    @staticmethod
    def _least_loaded_day(natural: date, daily_load: dict[date, int], max_defer_days: int) -> date:
        window = [natural + timedelta(days=offset) for offset in range(max_defer_days + 1)]
        # min() keeps the first minimum, i.e. the earliest day on ties
        return min(window, key=lambda day: daily_load.get(day, 0))
