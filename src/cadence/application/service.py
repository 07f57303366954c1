"""
Scheduling Service: Application layer orchestrator.

Coordinates fetching items from the repository and running them through
the scheduling components.
"""

import logging
from dataclasses import replace
from datetime import datetime

from cadence.domain.constants import (
    DEFAULT_FORECAST_DAYS,
    DEFAULT_MAX_DEFER_DAYS,
    DEFAULT_MAX_REVIEWS_PER_DAY,
    DEFAULT_UPCOMING_DAYS,
)
from cadence.domain.errors import ItemNotFoundError
from cadence.domain.scheduling.models import (
    ForgettingPoint,
    ReviewObservation,
    ScheduleEntry,
    StudyItem,
)
from cadence.domain.scheduling.ports import ItemRepository

from .scheduling import DueSelector, ForgettingCurveEstimator, SchedulingEngine

logger = logging.getLogger(__name__)


class SchedulingService:
    """
    Application service for reviewing and planning study items.

    Follows Dependency Inversion: depends on the ItemRepository abstraction,
    not concrete adapter implementations. Never writes items back; callers
    persist the returned state.
    """

    def __init__(
        self,
        item_repo: ItemRepository,
        engine: SchedulingEngine | None = None,
        selector: DueSelector | None = None,
        estimator: ForgettingCurveEstimator | None = None,
    ):
        """
        Args:
            item_repo: The repository (port) for fetching items.
            engine: Optional custom engine; enhanced mode if not provided.
            selector: Optional custom due selector.
            estimator: Optional custom forgetting-curve estimator.
        """
        self._repo = item_repo
        self._engine = engine or SchedulingEngine()
        self._selector = selector or DueSelector()
        self._estimator = estimator or ForgettingCurveEstimator()

    async def review(
        self,
        item_id: str,
        observation: ReviewObservation,
        now: datetime | None = None,
    ) -> StudyItem:
        """
        Apply a review to an item.

        Returns:
            A copy of the item carrying the updated memory state.
        """
        item = await self._require(item_id)
        model = self._engine.update(item.model, observation, now)
        logger.info(
            f"Reviewed {item_id}: interval {item.model.interval} -> {model.interval}, "
            f"next review {model.next_review_date}"
        )
        return replace(item, model=model)

    async def get_due(self, now: datetime) -> list[StudyItem]:
        items = await self._repo.list_items()
        return self._selector.due_now(items, now)

    async def get_upcoming(
        self, now: datetime, days: int = DEFAULT_UPCOMING_DAYS
    ) -> list[StudyItem]:
        items = await self._repo.list_items()
        return self._selector.due_within(items, now, days)

    async def plan(
        self,
        max_per_day: int = DEFAULT_MAX_REVIEWS_PER_DAY,
        max_defer_days: int = DEFAULT_MAX_DEFER_DAYS,
    ) -> ScheduleEntry:
        """
        Build a load-balanced review plan for every item in the store.
        """
        items = await self._repo.list_items()
        if not items:
            return {}
        return self._selector.balance_load(items, max_per_day, max_defer_days)

    async def forecast(
        self, item_id: str, days: int = DEFAULT_FORECAST_DAYS
    ) -> list[ForgettingPoint]:
        item = await self._require(item_id)
        return self._estimator.predict(item.model, days)

    async def _require(self, item_id: str) -> StudyItem:
        item = await self._repo.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item
