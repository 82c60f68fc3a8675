"""Models module exporting all database models."""

from .manager import Manager
from .show import Show
from .tour import Tour

__all__ = [
    "Manager",
    "Show",
    "Tour",
]
