"""
Metrics calculator for deriving study insights from review history.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from cadence.domain.constants import (
    DEFAULT_REVIEW_HOUR,
    MASTERY_REPETITIONS,
    MAX_REVIEW_HOUR_SHIFT,
    MAX_STREAK_DAYS,
    MIN_REVIEWS_FOR_PATTERN,
)
from cadence.domain.scheduling.models import ReviewRecord, StudyItem


@dataclass
class StudyStats:
    """
    Dashboard-level summary of a collection.
    """

    total_items: int
    items_due_today: int
    items_reviewed_today: int
    average_accuracy: int  # Percentage 0-100
    current_streak: int  # Consecutive days with reviews, ending today
    longest_streak: int
    total_reviews: int


@dataclass
class LearningMetrics:
    """
    Performance profile of a learner across all items.
    """

    total_reviews: int
    success_rate: float  # 0.0-1.0
    average_response_time_ms: float
    learning_velocity: float  # Items mastered per active day
    retention_rate: int  # Percentage 0-100
    streak_count: int


def _percent(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return int(part * 100 / whole + 0.5)


class MetricsCalculator:
    """
    Computes derived metrics from StudyItem collections.

    Stateless and side-effect free.
    """

    def retention_rate(self, records: Iterable[ReviewRecord]) -> int:
        """
        Share of correct reviews as a rounded percentage.
        """
        records = list(records)
        correct = sum(1 for r in records if r.was_correct)
        return _percent(correct, len(records))

    def study_stats(self, items: list[StudyItem], today: date) -> StudyStats:
        records = [r for item in items for r in item.reviews]
        review_days = {r.reviewed_at.date() for r in records}

        due_today = sum(1 for item in items if item.model.next_review_date <= today)
        reviewed_today = sum(
            1 for item in items if any(r.reviewed_at.date() == today for r in item.reviews)
        )

        return StudyStats(
            total_items=len(items),
            items_due_today=due_today,
            items_reviewed_today=reviewed_today,
            average_accuracy=self.retention_rate(records),
            current_streak=self._current_streak(review_days, today),
            longest_streak=self._longest_streak(review_days),
            total_reviews=len(records),
        )

    def learning_metrics(self, items: list[StudyItem]) -> LearningMetrics:
        records = [r for item in items for r in item.reviews]
        review_days = {r.reviewed_at.date() for r in records}
        total = len(records)

        if total == 0:
            return LearningMetrics(
                total_reviews=0,
                success_rate=0.0,
                average_response_time_ms=0.0,
                learning_velocity=0.0,
                retention_rate=0,
                streak_count=0,
            )

        correct = sum(1 for r in records if r.was_correct)
        mastered = sum(1 for item in items if item.model.repetitions >= MASTERY_REPETITIONS)

        return LearningMetrics(
            total_reviews=total,
            success_rate=correct / total,
            average_response_time_ms=sum(r.response_time_ms for r in records) / total,
            learning_velocity=mastered / len(review_days),
            retention_rate=_percent(correct, total),
            streak_count=self._longest_streak(review_days),
        )

    def optimal_review_hour(self, metrics: LearningMetrics) -> float:
        """
        Suggested hour of day to study.

        Defaults to 9 AM until there is enough history, then shifts later
        for faster learners (by at most three hours).
        """
        if metrics.total_reviews < MIN_REVIEWS_FOR_PATTERN:
            return float(DEFAULT_REVIEW_HOUR)
        return DEFAULT_REVIEW_HOUR + min(MAX_REVIEW_HOUR_SHIFT, metrics.learning_velocity)

    @staticmethod
    def _current_streak(review_days: set[date], today: date) -> int:
        streak = 0
        day = today
        while streak < MAX_STREAK_DAYS and day in review_days:
            streak += 1
            day -= timedelta(days=1)
        return streak

    @staticmethod
    def _longest_streak(review_days: set[date]) -> int:
        longest = 0
        for day in review_days:
            # Only count runs from their first day
            if day - timedelta(days=1) in review_days:
                continue
            length = 1
            while day + timedelta(days=length) in review_days:
                length += 1
            longest = max(longest, length)
        return longest
