"""
Item Repository Factory
Centralizes the logic for selecting the appropriate item source.
"""

from pathlib import Path

from cadence.application.config import AppConfig
from cadence.domain.errors import ItemSourceError
from cadence.domain.scheduling.ports import ItemRepository
from cadence.infrastructure.adapters.item_file import FileItemRepository


async def get_item_repository(config: AppConfig, path: Path | None = None) -> ItemRepository:
    """
    Returns the ItemRepository for an explicit path, else the configured items_file.
    """
    source = path or config.items_file
    if source is None:
        raise ItemSourceError(
            "No items file given. Pass one on the command line or set CADENCE_ITEMS_FILE."
        )
    return FileItemRepository(source)
