from .item_file import FileItemRepository

__all__ = ["FileItemRepository"]
