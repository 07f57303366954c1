"""
SM-2+ scheduling engine.

Given the current DifficultyModel of an item and a review observation,
produces the next DifficultyModel:

1. Adjust the raw score by response time and confidence
2. Update repetitions, ease factor and the quality moving average
3. Drift the adaptive difficulty and recompute memory stability
4. Derive the next interval

`classic` mode runs plain SM-2 on the raw score and carries difficulty
and stability over, clamped to their ranges.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Literal

from cadence.domain.constants import (
    DIFFICULTY_INTERVAL_STEP,
    DIFFICULTY_STEP,
    EASY_MIN_REPETITIONS,
    EASY_SCORE_THRESHOLD,
    FAILED_INTERVAL,
    FIRST_SUCCESS_INTERVAL,
    INITIAL_DIFFICULTY,
    MAX_DIFFICULTY,
    MAX_EASE_FACTOR,
    MAX_INTERVAL,
    MAX_SCORE,
    MAX_STABILITY,
    MIN_DIFFICULTY,
    MIN_EASE_FACTOR,
    MIN_SCORE,
    MIN_STABILITY,
    PASSING_SCORE,
    QUALITY_RECENCY_WEIGHT,
    STABILITY_INTERVAL_BONUS,
    STABILITY_REPETITION_CAP,
    STABILITY_WEIGHT_EASE,
    STABILITY_WEIGHT_QUALITY,
    STABILITY_WEIGHT_REPETITIONS,
)
from cadence.domain.scheduling.models import DifficultyModel, ReviewObservation

from .evaluator import ReviewEvaluator

logger = logging.getLogger(__name__)

SchedulerMode = Literal["classic", "enhanced"]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; intervals round .5 upwards.
    return math.floor(value + 0.5)


class SchedulingEngine:
    """
    Applies the SM-2+ update rule.

    Stateless: the same engine can be shared across threads, every call
    returns a fresh model.
    """

    def __init__(
        self,
        mode: SchedulerMode = "enhanced",
        evaluator: ReviewEvaluator | None = None,
    ):
        """
        Args:
            mode: "enhanced" for SM-2+, "classic" for plain SM-2.
            evaluator: Optional custom evaluator; uses default if not provided.
        """
        if mode not in ("classic", "enhanced"):
            raise ValueError(f"Unknown scheduler mode: {mode!r}")
        self.mode = mode
        self._evaluator = evaluator or ReviewEvaluator()

    def update(
        self,
        model: DifficultyModel,
        observation: ReviewObservation,
        now: datetime | None = None,
    ) -> DifficultyModel:
        """
        Compute the item's next memory state.

        Args:
            model: Current state; left untouched.
            observation: The review that just happened.
            now: Review instant; defaults to the current UTC time.

        Returns:
            A new DifficultyModel with last_review set to `now`.
        """
        now = now or datetime.now(timezone.utc)

        if self.mode == "classic":
            adjusted = _clamp(observation.score, MIN_SCORE, MAX_SCORE)
        else:
            adjusted = self._evaluator.evaluate(observation)

        repetitions = model.repetitions + 1 if adjusted >= PASSING_SCORE else 0
        if repetitions == 0 and model.repetitions > 0:
            logger.debug(
                f"Recall failed (adjusted={adjusted:.2f}); resetting {model.repetitions} repetitions"
            )

        ease_factor = self._next_ease_factor(model.ease_factor, adjusted)
        average_quality = self._next_average_quality(model.average_quality, adjusted)

        if self.mode == "classic":
            difficulty = _clamp(model.difficulty, MIN_DIFFICULTY, MAX_DIFFICULTY)
            stability = _clamp(model.stability_factor, MIN_STABILITY, MAX_STABILITY)
            interval = self._classic_interval(model.interval, repetitions, ease_factor)
        else:
            difficulty = self._next_difficulty(model.difficulty, adjusted, repetitions)
            stability = self.stability_factor(repetitions, average_quality, ease_factor)
            interval = self._enhanced_interval(
                model.interval, repetitions, ease_factor, stability, difficulty
            )

        return replace(
            model,
            ease_factor=ease_factor,
            interval=interval,
            repetitions=repetitions,
            difficulty=difficulty,
            average_quality=average_quality,
            stability_factor=stability,
            last_review=now,
        )

    # ---------- individual steps ----------

    @staticmethod
    def _next_ease_factor(ease_factor: float, adjusted: float) -> float:
        miss = MAX_SCORE - adjusted
        candidate = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
        clamped = _clamp(candidate, MIN_EASE_FACTOR, MAX_EASE_FACTOR)
        if clamped != candidate:
            logger.debug(f"Ease factor {candidate:.3f} clamped to {clamped:.3f}")
        return clamped

    @staticmethod
    def _next_average_quality(previous: float, adjusted: float) -> float:
        if previous == 0:
            return adjusted
        return (1 - QUALITY_RECENCY_WEIGHT) * previous + QUALITY_RECENCY_WEIGHT * adjusted

    @staticmethod
    def _next_difficulty(difficulty: float, adjusted: float, repetitions: int) -> float:
        """
        Drift difficulty up when the item is consistently easy, down on failure.

        Scores in [3, 4.5) leave difficulty alone.
        """
        difficulty = _clamp(difficulty, MIN_DIFFICULTY, MAX_DIFFICULTY)
        if adjusted >= EASY_SCORE_THRESHOLD and repetitions >= EASY_MIN_REPETITIONS:
            return min(MAX_DIFFICULTY, difficulty + DIFFICULTY_STEP)
        if adjusted < PASSING_SCORE:
            return max(MIN_DIFFICULTY, difficulty - DIFFICULTY_STEP)
        return difficulty

    @staticmethod
    def stability_factor(repetitions: int, average_quality: float, ease_factor: float) -> float:
        """
        Weighted composite of repetition count, average quality and ease.

        Each component is normalized to [0, 1]; weights sum to 1.
        """
        repetition_part = min(1.0, repetitions / STABILITY_REPETITION_CAP)
        quality_part = _clamp(average_quality, MIN_SCORE, MAX_SCORE) / MAX_SCORE
        ease_part = (ease_factor - MIN_EASE_FACTOR) / (MAX_EASE_FACTOR - MIN_EASE_FACTOR)

        return (
            STABILITY_WEIGHT_REPETITIONS * repetition_part
            + STABILITY_WEIGHT_QUALITY * quality_part
            + STABILITY_WEIGHT_EASE * ease_part
        )

    @staticmethod
    def _enhanced_interval(
        previous_interval: int,
        repetitions: int,
        ease_factor: float,
        stability: float,
        difficulty: float,
    ) -> int:
        if repetitions == 0:
            interval = FAILED_INTERVAL
        elif repetitions == 1:
            interval = FIRST_SUCCESS_INTERVAL
        else:
            base = _round_half_up(
                previous_interval * ease_factor * (1 + stability * STABILITY_INTERVAL_BONUS)
            )
            multiplier = 1 + (difficulty - INITIAL_DIFFICULTY) * DIFFICULTY_INTERVAL_STEP
            interval = max(1, _round_half_up(base * multiplier))

        return min(MAX_INTERVAL, interval)

    @staticmethod
    def _classic_interval(previous_interval: int, repetitions: int, ease_factor: float) -> int:
        if repetitions == 0:
            interval = FAILED_INTERVAL
        elif repetitions == 1:
            interval = FIRST_SUCCESS_INTERVAL
        else:
            interval = max(1, _round_half_up(previous_interval * ease_factor))

        return min(MAX_INTERVAL, interval)
