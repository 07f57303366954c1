"""
File Item Repository: Infrastructure adapter for JSON / YAML item documents.

Implements ItemRepository by reading a document exported by the host
application. Read-only: the scheduler never writes item state back.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml  # type: ignore

from cadence.domain.errors import ItemSourceError
from cadence.domain.scheduling.models import StudyItem
from cadence.domain.scheduling.ports import ItemRepository
from cadence.infrastructure.utils.records import item_from_record

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class FileItemRepository(ItemRepository):
    """
    Loads study items from a `.json`, `.yaml` or `.yml` file.

    The document is either a list of item records or a mapping with an
    `items` list. Malformed records are skipped with a warning; an
    unreadable document raises ItemSourceError.
    """

    def __init__(self, path: Path):
        self.path = path
        self._items: dict[str, StudyItem] | None = None

    async def list_items(self) -> list[StudyItem]:
        return list(self._load().values())

    async def get_item(self, item_id: str) -> StudyItem | None:
        return self._load().get(item_id)

    def _load(self) -> dict[str, StudyItem]:
        if self._items is not None:
            return self._items

        items: dict[str, StudyItem] = {}
        for index, record in enumerate(self._read_records()):
            try:
                item = item_from_record(record)
            except ItemSourceError as e:
                logger.warning(f"Skipping record #{index} in {self.path}: {e}")
                continue

            if item.id in items:
                logger.warning(f"Duplicate item id {item.id} in {self.path}; keeping the first")
                continue
            items[item.id] = item

        logger.debug(f"Loaded {len(items)} items from {self.path}")
        self._items = items
        return items

    def _read_records(self) -> list[Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ItemSourceError(f"Cannot read {self.path}: {e}") from e

        try:
            if self.path.suffix.lower() in YAML_SUFFIXES:
                document = yaml.safe_load(text)
            else:
                document = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ItemSourceError(f"Cannot parse {self.path}: {e}") from e

        if document is None:
            return []
        if isinstance(document, dict):
            document = document.get("items", [])
        if not isinstance(document, list):
            raise ItemSourceError(f"{self.path} must contain a list of items")
        return document
