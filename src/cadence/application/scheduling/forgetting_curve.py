"""
Forgetting curve projection.

retention(day) = 0.5 ** (day / half_life), half_life = max(1, interval * stability)
"""

from cadence.domain.constants import DEFAULT_FORECAST_DAYS, MIN_HALF_LIFE
from cadence.domain.scheduling.models import DifficultyModel, ForgettingPoint


class ForgettingCurveEstimator:
    """
    Projects retention forward from a memory-state snapshot.

    Independent of the update rule; holds no state between calls.
    """

    def half_life(self, model: DifficultyModel) -> float:
        return max(MIN_HALF_LIFE, model.interval * model.stability_factor)

    def retention_at(self, model: DifficultyModel, days: float) -> float:
        """
        Probability of recall `days` after the last review.
        """
        if days < 0:
            raise ValueError(f"days must be >= 0, got {days}")
        return 0.5 ** (days / self.half_life(model))

    def predict(
        self, model: DifficultyModel, days_ahead: int = DEFAULT_FORECAST_DAYS
    ) -> list[ForgettingPoint]:
        """
        Retention for each whole day from 0 through `days_ahead` inclusive.
        """
        if days_ahead < 0:
            raise ValueError(f"days_ahead must be >= 0, got {days_ahead}")

        half_life = self.half_life(model)
        return [
            ForgettingPoint(day=day, retention=0.5 ** (day / half_life))
            for day in range(days_ahead + 1)
        ]
