"""
Ports (interfaces) for item retrieval.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import StudyItem


class ItemRepository(ABC):
    """
    Port for fetching study items from the host application's storage.

    Implementations:
        - FileItemRepository: Reads a JSON or YAML document of items.
    """

    @abstractmethod
    async def list_items(self) -> list[StudyItem]:
        """
        Fetch every study item known to the store.

        Returns:
            List of StudyItem objects in storage order.
        """
        pass

    @abstractmethod
    async def get_item(self, item_id: str) -> StudyItem | None:
        """
        Fetch a single item.

        Args:
            item_id: Identifier of the item.

        Returns:
            The StudyItem, or None if the store has no such item.
        """
        pass
