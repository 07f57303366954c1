"""Cadence: SM-2+ spaced-repetition scheduling."""

from cadence.consts import VERSION

__version__ = VERSION
