"""
Review evaluator: turns a raw observation into an adjusted quality score.

This is a pure computation module with no I/O.
"""

from cadence.domain.constants import (
    LEGACY_RESPONSE_MS,
    MAX_CONFIDENCE,
    MAX_RESPONSE_MS,
    MAX_SCORE,
    MIN_CONFIDENCE,
    MIN_SCORE,
    OPTIMAL_RESPONSE_MS,
    SLOW_RESPONSE_FACTOR,
)
from cadence.domain.scheduling.models import ReviewObservation


class ReviewEvaluator:
    """
    Scales recall quality by response speed and self-reported confidence.

    Stateless and side-effect free. Inputs are clamped into their domains;
    strict validation happens when a ReviewObservation is built.
    """

    def evaluate(self, observation: ReviewObservation) -> float:
        return self.adjust(
            observation.score, observation.response_time_ms, observation.confidence
        )

    def adjust(self, score: float, response_time_ms: float, confidence: float) -> float:
        """
        Compute the adjusted score.

        adjusted = score * response_time_factor * (confidence / 5)
        """
        score = min(MAX_SCORE, max(MIN_SCORE, score))
        confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence))
        return score * self.response_time_factor(response_time_ms) * self.confidence_factor(
            confidence
        )

    @staticmethod
    def response_time_factor(response_time_ms: float) -> float:
        """
        Full weight up to 3s, half weight from 30s, linear in between.
        """
        if response_time_ms <= OPTIMAL_RESPONSE_MS:
            return 1.0
        if response_time_ms >= MAX_RESPONSE_MS:
            return SLOW_RESPONSE_FACTOR

        span = MAX_RESPONSE_MS - OPTIMAL_RESPONSE_MS
        return 1.0 - (1.0 - SLOW_RESPONSE_FACTOR) * (response_time_ms - OPTIMAL_RESPONSE_MS) / span

    @staticmethod
    def confidence_factor(confidence: float) -> float:
        return confidence / MAX_CONFIDENCE


def observation_from_quality(quality: int) -> ReviewObservation:
    """
    Build an observation from a bare 0-5 quality grade.

    Used for inputs that only record a grade: confidence is inferred from
    the grade and the response time is assumed to be 5 seconds.
    """
    if quality >= 4:
        confidence = 5
    elif quality >= 2:
        confidence = 3
    else:
        confidence = 1

    return ReviewObservation(
        score=quality, response_time_ms=LEGACY_RESPONSE_MS, confidence=confidence
    )
