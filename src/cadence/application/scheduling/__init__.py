# Application Scheduling Package
from .due_selector import DueSelector, review_priority
from .engine import SchedulerMode, SchedulingEngine
from .evaluator import ReviewEvaluator, observation_from_quality
from .forgetting_curve import ForgettingCurveEstimator

__all__ = [
    "ReviewEvaluator",
    "observation_from_quality",
    "SchedulingEngine",
    "SchedulerMode",
    "DueSelector",
    "review_priority",
    "ForgettingCurveEstimator",
]
