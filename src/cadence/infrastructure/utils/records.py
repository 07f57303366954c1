"""Conversion between plain records (dicts) and scheduling domain objects."""

from datetime import datetime, timezone
from typing import Any

from cadence.domain.errors import ItemSourceError
from cadence.domain.scheduling.models import DifficultyModel, ReviewRecord, StudyItem

# ---------- Timestamps ----------


def parse_timestamp(value: Any) -> datetime:
    """
    Accept a datetime or an ISO-8601 string; naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ItemSourceError(f"Invalid timestamp {value!r}") from e
    else:
        raise ItemSourceError(f"Invalid timestamp {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# ---------- Records -> domain ----------


def model_from_record(data: dict[str, Any]) -> DifficultyModel:
    """
    Build a DifficultyModel; missing fields take their initial-state values.
    """
    if "last_review" not in data:
        raise ItemSourceError("Memory state is missing 'last_review'")

    initial = DifficultyModel.initial(parse_timestamp(data["last_review"]))
    try:
        return DifficultyModel(
            ease_factor=float(data.get("ease_factor", initial.ease_factor)),
            interval=int(data.get("interval", initial.interval)),
            repetitions=int(data.get("repetitions", initial.repetitions)),
            difficulty=float(data.get("difficulty", initial.difficulty)),
            average_quality=float(data.get("average_quality", initial.average_quality)),
            stability_factor=float(data.get("stability_factor", initial.stability_factor)),
            last_review=initial.last_review,
        )
    except (TypeError, ValueError) as e:
        raise ItemSourceError(f"Invalid memory state: {e}") from e


def review_from_record(item_id: str, data: dict[str, Any]) -> ReviewRecord:
    try:
        return ReviewRecord(
            item_id=item_id,
            reviewed_at=parse_timestamp(data["reviewed_at"]),
            quality=int(data["quality"]),
            response_time_ms=int(data.get("response_time_ms", 0)),
            was_correct=bool(data.get("was_correct", int(data["quality"]) >= 3)),
        )
    except KeyError as e:
        raise ItemSourceError(f"Review of {item_id} is missing {e}") from e
    except (TypeError, ValueError) as e:
        raise ItemSourceError(f"Invalid review of {item_id}: {e}") from e


def item_from_record(data: Any) -> StudyItem:
    """
    Parse one item record.

    Expected shape::

        {"id": "...", "prompt": "...", "model": {...}, "reviews": [...]}
    """
    if not isinstance(data, dict):
        raise ItemSourceError(f"Item record must be a mapping, got {type(data).__name__}")

    item_id = data.get("id")
    if not item_id:
        raise ItemSourceError("Item record has no 'id'")
    item_id = str(item_id)

    state = data.get("model")
    if not isinstance(state, dict):
        raise ItemSourceError(f"Item {item_id} has no 'model' mapping")

    reviews = data.get("reviews") or []
    if not isinstance(reviews, list):
        raise ItemSourceError(f"Item {item_id}: 'reviews' must be a list")

    return StudyItem(
        id=item_id,
        model=model_from_record(state),
        prompt=data.get("prompt"),
        answer=data.get("answer"),
        subject=data.get("subject"),
        reviews=[review_from_record(item_id, r) for r in reviews if isinstance(r, dict)],
    )


# ---------- Domain -> records ----------


def model_to_record(model: DifficultyModel) -> dict[str, Any]:
    return {
        "ease_factor": model.ease_factor,
        "interval": model.interval,
        "repetitions": model.repetitions,
        "difficulty": model.difficulty,
        "average_quality": model.average_quality,
        "stability_factor": model.stability_factor,
        "last_review": model.last_review.isoformat(),
    }


def item_to_record(item: StudyItem) -> dict[str, Any]:
    """
    Serialize an item, including the derived next review instant.
    """
    record: dict[str, Any] = {"id": item.id}
    for key in ("prompt", "answer", "subject"):
        value = getattr(item, key)
        if value is not None:
            record[key] = value

    record["model"] = model_to_record(item.model)
    record["next_review"] = item.model.next_review.isoformat()

    if item.reviews:
        record["reviews"] = [
            {
                "reviewed_at": r.reviewed_at.isoformat(),
                "quality": r.quality,
                "response_time_ms": r.response_time_ms,
                "was_correct": r.was_correct,
            }
            for r in item.reviews
        ]
    return record
