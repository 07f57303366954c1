"""
Domain models for SM-2+ scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from cadence.domain.constants import (
    INITIAL_DIFFICULTY,
    INITIAL_EASE_FACTOR,
    MAX_CONFIDENCE,
    MAX_SCORE,
    MIN_CONFIDENCE,
    MIN_SCORE,
)
from cadence.domain.errors import InvalidModelError, InvalidObservationError


@dataclass(frozen=True)
class DifficultyModel:
    """
    Memory-state snapshot for a single study item.

    Instances are never mutated; the scheduling engine returns a new one
    per review.

    Attributes:
        ease_factor: Interval growth multiplier (1.3-2.5).
        interval: Days until the next scheduled review.
        repetitions: Consecutive successful reviews since the last failure.
        difficulty: Adaptive per-item hardness (1-10).
        average_quality: Moving average of adjusted scores (0 means unset).
        stability_factor: Composite durability estimate (0.0-1.0).
        last_review: Timezone-aware timestamp of the most recent update.
    """

    ease_factor: float
    interval: int
    repetitions: int
    difficulty: float
    average_quality: float
    stability_factor: float
    last_review: datetime

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise InvalidModelError(f"interval must be >= 0, got {self.interval}")
        if self.repetitions < 0:
            raise InvalidModelError(f"repetitions must be >= 0, got {self.repetitions}")
        # Values above range are clamped by the engine; negatives are corrupt state.
        for name in ("difficulty", "average_quality", "stability_factor"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidModelError(f"{name} must be >= 0, got {value}")
        if self.last_review.tzinfo is None:
            raise InvalidModelError("last_review must be timezone-aware")

    @classmethod
    def initial(cls, now: datetime) -> "DifficultyModel":
        """State for an item that has never been reviewed."""
        return cls(
            ease_factor=INITIAL_EASE_FACTOR,
            interval=1,
            repetitions=0,
            difficulty=INITIAL_DIFFICULTY,
            average_quality=0.0,
            stability_factor=0.0,
            last_review=now,
        )

    @property
    def next_review(self) -> datetime:
        return self.last_review + timedelta(days=self.interval)

    @property
    def next_review_date(self) -> date:
        return self.next_review.date()


@dataclass(frozen=True)
class ReviewObservation:
    """
    A single review event as reported by the host application.

    Attributes:
        score: Raw recall quality (0-5).
        response_time_ms: Time to answer in milliseconds.
        confidence: Self-reported confidence (1-5).
    """

    score: float
    response_time_ms: float
    confidence: int

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise InvalidObservationError(
                f"score must be within [{MIN_SCORE:g}, {MAX_SCORE:g}], got {self.score}"
            )
        if self.response_time_ms < 0:
            raise InvalidObservationError(
                f"response_time_ms must be >= 0, got {self.response_time_ms}"
            )
        if not MIN_CONFIDENCE <= self.confidence <= MAX_CONFIDENCE:
            raise InvalidObservationError(
                f"confidence must be within [{MIN_CONFIDENCE}, {MAX_CONFIDENCE}], "
                f"got {self.confidence}"
            )


@dataclass(frozen=True)
class ReviewRecord:
    """
    A historical review log entry, used for statistics only.

    Attributes:
        item_id: The item that was reviewed.
        reviewed_at: When the review happened.
        quality: Raw quality score (0-5).
        response_time_ms: Time to answer in milliseconds.
        was_correct: Whether the answer counted as a successful recall.
    """

    item_id: str
    reviewed_at: datetime
    quality: int
    response_time_ms: int
    was_correct: bool


@dataclass
class StudyItem:
    """A schedulable item: identifier, memory state and display content."""

    id: str
    model: DifficultyModel

    # Content (for display purposes)
    prompt: str | None = None
    answer: str | None = None
    subject: str | None = None

    reviews: list[ReviewRecord] = field(default_factory=list)


@dataclass(frozen=True)
class ForgettingPoint:
    """Projected retention probability `day` days after the last review."""

    day: int
    retention: float


# Output of load balancing: item id -> assigned calendar date.
ScheduleEntry = dict[str, date]
