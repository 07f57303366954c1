# Application Stats Package
from .metrics_calculator import LearningMetrics, MetricsCalculator, StudyStats

__all__ = ["MetricsCalculator", "StudyStats", "LearningMetrics"]
