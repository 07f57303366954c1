# Domain Scheduling Package
from .models import (
    DifficultyModel,
    ForgettingPoint,
    ReviewObservation,
    ReviewRecord,
    ScheduleEntry,
    StudyItem,
)
from .ports import ItemRepository

__all__ = [
    "DifficultyModel",
    "ReviewObservation",
    "ReviewRecord",
    "StudyItem",
    "ForgettingPoint",
    "ScheduleEntry",
    "ItemRepository",
]
