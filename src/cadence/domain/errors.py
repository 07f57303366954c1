"""Exception hierarchy shared by every layer."""


class CadenceError(Exception):
    """Base class for all Cadence errors."""


class InvalidObservationError(CadenceError, ValueError):
    """A review observation is outside its documented domain."""


class InvalidModelError(CadenceError, ValueError):
    """A memory-state snapshot cannot be represented."""


class ItemNotFoundError(CadenceError, KeyError):
    """No study item exists with the requested identifier."""

    def __str__(self) -> str:
        return f"Unknown item: {self.args[0]}" if self.args else "Unknown item"


class ItemSourceError(CadenceError):
    """An item source could not be read or parsed."""
